"""Observability & Config — JSON log records and settings coercion."""

import json
import logging

from unrecorded.config import Settings
from unrecorded.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "unrecorded.test", logging.INFO, __file__, 1, "hello", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_known_extras():
    out = json.loads(JSONFormatter().format(
        _record(user_id="u-1", operation="delete_user"),
    ))
    assert out["message"] == "hello"
    assert out["level"] == "INFO"
    assert out["user_id"] == "u-1"
    assert out["operation"] == "delete_user"


def test_json_formatter_ignores_unknown_extras():
    out = json.loads(JSONFormatter().format(_record(token="secret")))
    assert "token" not in out


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@host:5432/db")
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/db"


def test_session_defaults():
    settings = Settings(database_url="sqlite+aiosqlite:///:memory:")
    assert settings.session_ttl_minutes > 0
    assert settings.database_pool_timeout_seconds == 30.0
