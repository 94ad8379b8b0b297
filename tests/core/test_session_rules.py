"""Session Rules — expiry boundaries and the active check."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from unrecorded.core import session_rules
from unrecorded.core.domain_types import SessionState
from unrecorded.core.errors import InvalidArgumentError

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class _Session:
    expires_at: datetime
    id: UUID = uuid4()
    user_id: UUID = uuid4()
    token: str = "t"


def test_naive_datetime_read_as_utc():
    naive = datetime(2026, 1, 1, 12, 0)
    assert session_rules.as_utc(naive) == NOW


def test_expiry_must_be_strictly_future():
    with pytest.raises(InvalidArgumentError) as exc:
        session_rules.check_expiry_in_future(NOW, NOW)
    assert exc.value.field == "expires_at"
    session_rules.check_expiry_in_future(NOW + timedelta(seconds=1), NOW)


def test_state_flips_at_expires_at():
    assert session_rules.session_state(NOW + timedelta(seconds=1), NOW) is SessionState.ACTIVE
    assert session_rules.session_state(NOW, NOW) is SessionState.EXPIRED


def test_missing_session_is_not_active():
    assert session_rules.is_session_active(None, NOW) is False


def test_expired_session_is_not_active():
    assert session_rules.is_session_active(_Session(NOW - timedelta(minutes=1)), NOW) is False


def test_live_session_is_active():
    assert session_rules.is_session_active(_Session(NOW + timedelta(minutes=1)), NOW) is True


def test_login_expiry_adds_ttl():
    assert session_rules.login_expiry(NOW, 30) == NOW + timedelta(minutes=30)


def test_login_expiry_rejects_non_positive_ttl():
    with pytest.raises(InvalidArgumentError):
        session_rules.login_expiry(NOW, 0)
