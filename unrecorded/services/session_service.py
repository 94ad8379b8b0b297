"""Session Service — session creation, lookup, authentication, expiry sweep.

Invariants:
    - create_session rejects expires_at <= now before any transaction opens
    - Lookups return None / [] for absence, never raise
    - authenticate() is the only lookup that authorizes: an expired row is
      treated exactly like a missing one
    - delete_session and sweep_expired are set-based deletes: idempotent and
      safe to run concurrently (a row is counted by at most one caller)
    - Tokens are never logged

Design Decisions:
    - No background timer: sweep_expired is triggered by the API or an external scheduler
"""

import logging
import secrets
from datetime import datetime
from uuid import UUID

from unrecorded.core import session_rules
from unrecorded.core.errors import (
    AuthenticationError, ConflictError, ErrorContext, InvalidArgumentError,
    ResourceNotFoundError,
)
from unrecorded.core.store_protocols import Store
from unrecorded.models.session import Session as SessionModel
from unrecorded.models.user import User
from unrecorded.services.clock import Clock, utc_now
from unrecorded.services.user_service import UserService

logger = logging.getLogger(__name__)


class SessionService:
    """Authentication session lifecycle."""

    def __init__(
        self,
        store: Store,
        users: UserService | None = None,
        clock: Clock = utc_now,
        ttl_minutes: int = 60 * 24,
        token_bytes: int = 32,
    ):
        self.store = store
        self.users = users or UserService(store)
        self.clock = clock
        self.ttl_minutes = ttl_minutes
        self.token_bytes = token_bytes

    async def create_session(
        self, user_id: UUID, token: str, expires_at: datetime,
    ) -> SessionModel:
        if not token or not token.strip():
            raise InvalidArgumentError("Session token must not be blank.", "token")
        session_rules.check_expiry_in_future(expires_at, self.clock())

        async with self.store.transaction(write=True) as tx:
            if await tx.find(User, user_id) is None:
                raise ResourceNotFoundError(
                    "User", str(user_id), ErrorContext(user_id=str(user_id)),
                )
            if await tx.query(SessionModel, SessionModel.token == token):
                raise ConflictError("Session token is already in use.")
            session = await tx.persist(SessionModel(
                user_id=user_id,
                token=token,
                expires_at=session_rules.as_utc(expires_at),
            ))
        logger.info(
            "Session created",
            extra={"user_id": user_id, "session_id": session.id},
        )
        return session

    async def get_session_by_id(self, session_id: UUID) -> SessionModel | None:
        async with self.store.transaction() as tx:
            return await tx.find(SessionModel, session_id)

    async def get_sessions_by_user(self, user_id: UUID) -> list[SessionModel]:
        async with self.store.transaction() as tx:
            return await tx.query(
                SessionModel, SessionModel.user_id == user_id,
                order_by=SessionModel.expires_at,
            )

    async def get_session_by_token(self, token: str) -> SessionModel | None:
        async with self.store.transaction() as tx:
            sessions = await tx.query(SessionModel, SessionModel.token == token)
        return sessions[0] if sessions else None

    async def authenticate(
        self, token: str, now: datetime | None = None,
    ) -> SessionModel | None:
        """Return the session only if it exists AND is active at `now`."""
        session = await self.get_session_by_token(token)
        if not session_rules.is_session_active(session, now or self.clock()):
            return None
        return session

    async def login(self, username: str, password: str) -> SessionModel:
        """Verify credentials and open a fresh session with a random token."""
        user = await self.users.authenticate_credentials(username, password)
        if user is None:
            logger.warning("Login rejected", extra={"operation": "login"})
            raise AuthenticationError("Invalid username or password")
        now = self.clock()
        return await self.create_session(
            user.id,
            secrets.token_urlsafe(self.token_bytes),
            session_rules.login_expiry(now, self.ttl_minutes),
        )

    async def delete_session(self, session_id: UUID) -> bool:
        """Idempotent: True if a row was removed, False if none existed."""
        async with self.store.transaction(write=True) as tx:
            removed = await tx.remove_where(
                SessionModel, SessionModel.id == session_id,
            )
        if removed:
            logger.info("Session deleted", extra={"session_id": session_id})
        else:
            logger.debug("No session to delete", extra={"session_id": session_id})
        return removed > 0

    async def sweep_expired(self, now: datetime | None = None) -> bool:
        """Delete every session with expires_at < now; True if any were removed."""
        cutoff = session_rules.as_utc(now or self.clock())
        async with self.store.transaction(write=True) as tx:
            removed = await tx.remove_where(
                SessionModel, SessionModel.expires_at < cutoff,
            )
        logger.info(
            f"Expired-session sweep removed {removed} sessions",
            extra={"operation": "sweep_expired"},
        )
        return removed > 0
