"""Session Rules — pure lifecycle decisions for authentication sessions.

Invariants:
    - A session is ACTIVE iff now < expires_at; EXPIRED otherwise, whether or
      not the sweep has removed the row yet
    - A new session must expire strictly after the moment it is created
    - The sweep (services/session_service.py) removes exactly the sessions
      with expires_at < now, as one set-based delete
    - Naive datetimes are read as UTC (SQLite returns naive values)

Design Decisions:
    - Every authorization path calls is_session_active(); the store lookup
      alone never authenticates
"""

from datetime import datetime, timedelta, timezone

from unrecorded.core.domain_types import SessionState
from unrecorded.core.errors import InvalidArgumentError
from unrecorded.core.store_protocols import SessionLike


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def check_expiry_in_future(expires_at: datetime, now: datetime) -> None:
    if as_utc(expires_at) <= as_utc(now):
        raise InvalidArgumentError(
            "Session is already expired: expires_at must be in the future.",
            "expires_at",
        )


def session_state(expires_at: datetime, now: datetime) -> SessionState:
    if as_utc(now) < as_utc(expires_at):
        return SessionState.ACTIVE
    return SessionState.EXPIRED


def is_session_active(session: SessionLike | None, now: datetime) -> bool:
    """Found-but-expired and not-found both return False."""
    if session is None:
        return False
    return session_state(session.expires_at, now) is SessionState.ACTIVE


def login_expiry(now: datetime, ttl_minutes: int) -> datetime:
    if ttl_minutes <= 0:
        raise InvalidArgumentError("Session lifetime must be positive.", "ttl_minutes")
    return as_utc(now) + timedelta(minutes=ttl_minutes)
