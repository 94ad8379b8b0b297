"""Service test fixtures — async DB, transactional store, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - store is a DatabaseSessionManager bound to that database, so services
      run through the real transaction and error-mapping code
    - get_store dependency overridden for route tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency; row locks are no-ops
      there, which is fine for single-task tests
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from unrecorded.db.base import Base
import unrecorded.models  # noqa: F401
from unrecorded.infrastructure.database import DatabaseSessionManager, get_store
from unrecorded.main import app
from unrecorded.services.user_service import UserService

FIXED_NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def store(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(store):
    """FastAPI test client with the store dependency overridden."""
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def users(store):
    return UserService(store)


@pytest.fixture
def make_user(users):
    """Create users with unique names/emails/keys."""
    counter = {"n": 0}

    async def _make(name: str | None = None, password: str = "correct horse"):
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        return await users.create_user(
            name, password, f"{name}@example.com",
            f"pub-{name}", f"priv-{name}",
        )

    return _make


def later(minutes: int = 60) -> datetime:
    return FIXED_NOW + timedelta(minutes=minutes)
