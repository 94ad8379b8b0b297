"""User Service — registration, profile updates, credential checks, deletion cascade.

Invariants:
    - username, email and public_key uniqueness checked inside the write
      transaction (ConflictError); the unique indexes are the backstop
    - Passwords are hashed off the event loop and before the transaction opens,
      so no pooled connection waits on Argon2
    - delete_user runs the full membership cascade in ONE write transaction
    - Password hash and salt never leave this module except inside the User row
"""

import asyncio
import logging
from uuid import UUID

from unrecorded.core import credentials, validation
from unrecorded.core.errors import (
    ConflictError, ErrorContext, InvalidArgumentError, ResourceNotFoundError,
)
from unrecorded.core.store_protocols import Store, StoreTransaction
from unrecorded.models.user import User
from unrecorded.services.membership_consistency import (
    UserDeletionReport, cascade_user_deletion,
)

logger = logging.getLogger(__name__)


async def _hash_with_fresh_salt(password: str) -> tuple[str, bytes]:
    salt = credentials.generate_salt()
    password_hash = await asyncio.to_thread(credentials.hash_password, password, salt)
    return password_hash, salt


async def _ensure_unique(
    tx: StoreTransaction, column, value: str, label: str,
    exclude_user_id: UUID | None = None,
) -> None:
    criteria = [column == value]
    if exclude_user_id is not None:
        criteria.append(User.id != exclude_user_id)
    if await tx.query(User, *criteria):
        raise ConflictError(f"{label} is already taken.")


async def _get_or_404(tx: StoreTransaction, user_id: UUID) -> User:
    user = await tx.find(User, user_id)
    if user is None:
        raise ResourceNotFoundError(
            "User", str(user_id), ErrorContext(user_id=str(user_id)),
        )
    return user


class UserService:
    """User account operations."""

    def __init__(self, store: Store):
        self.store = store

    async def create_user(
        self,
        username: str,
        password: str,
        email: str,
        public_key: str,
        private_key_encrypted: str,
    ) -> User:
        validation.check_username(username)
        validation.check_email(email)
        validation.check_password(password)
        password_hash, salt = await _hash_with_fresh_salt(password)

        async with self.store.transaction(write=True) as tx:
            await _ensure_unique(tx, User.username, username, "Username")
            await _ensure_unique(tx, User.email, email, "Email")
            await _ensure_unique(tx, User.public_key, public_key, "Public key")
            user = await tx.persist(User(
                username=username,
                email=email,
                password_hash=password_hash,
                password_salt=salt,
                public_key=public_key,
                private_key_encrypted=private_key_encrypted,
            ))
        logger.info(
            f"User created: {username}", extra={"user_id": user.id},
        )
        return user

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        async with self.store.transaction() as tx:
            return await tx.find(User, user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        validation.check_username(username)
        async with self.store.transaction() as tx:
            users = await tx.query(User, User.username == username)
        return users[0] if users else None

    async def get_user_by_email(self, email: str) -> User | None:
        validation.check_email(email)
        async with self.store.transaction() as tx:
            users = await tx.query(User, User.email == email)
        return users[0] if users else None

    async def update_username(self, user_id: UUID, username: str) -> User:
        validation.check_username(username)
        async with self.store.transaction(write=True) as tx:
            user = await _get_or_404(tx, user_id)
            await _ensure_unique(
                tx, User.username, username, "Username", exclude_user_id=user_id,
            )
            user.username = username
            user = await tx.merge(user)
        logger.info("Username updated", extra={"user_id": user_id})
        return user

    async def update_email(self, user_id: UUID, email: str) -> User:
        validation.check_email(email)
        async with self.store.transaction(write=True) as tx:
            user = await _get_or_404(tx, user_id)
            await _ensure_unique(
                tx, User.email, email, "Email", exclude_user_id=user_id,
            )
            user.email = email
            user = await tx.merge(user)
        logger.info("Email updated", extra={"user_id": user_id})
        return user

    async def change_password(self, user_id: UUID, new_password: str) -> None:
        validation.check_password(new_password)
        password_hash, salt = await _hash_with_fresh_salt(new_password)
        async with self.store.transaction(write=True) as tx:
            user = await _get_or_404(tx, user_id)
            user.password_hash = password_hash
            user.password_salt = salt
            await tx.merge(user)
        logger.info("Password changed", extra={"user_id": user_id})

    async def update_keys(
        self, user_id: UUID, public_key: str, private_key_encrypted: str,
    ) -> User:
        async with self.store.transaction(write=True) as tx:
            user = await _get_or_404(tx, user_id)
            await _ensure_unique(
                tx, User.public_key, public_key, "Public key",
                exclude_user_id=user_id,
            )
            user.public_key = public_key
            user.private_key_encrypted = private_key_encrypted
            user = await tx.merge(user)
        logger.info("Keys updated", extra={"user_id": user_id})
        return user

    async def delete_user(self, user_id: UUID) -> UserDeletionReport | None:
        """Delete the user and cascade; None (no-op) if the user does not exist."""
        report = await self.store.execute_transaction(
            True, lambda tx: cascade_user_deletion(tx, user_id),
        )
        if report is None:
            logger.warning(
                "No user found for deletion", extra={"user_id": user_id},
            )
        return report

    async def authenticate_credentials(
        self, username: str, password: str,
    ) -> User | None:
        """Return the user iff the password matches.

        Malformed input is reported like an unknown user, so the login path
        never reveals field rules.
        """
        try:
            validation.check_username(username)
            validation.check_password(password)
        except InvalidArgumentError:
            return None
        user = await self.get_user_by_username(username)
        if user is None:
            return None
        matches = await asyncio.to_thread(
            credentials.verify_password,
            user.password_hash, password, user.password_salt,
        )
        return user if matches else None

    async def verify_user_password(self, username: str, password: str) -> bool:
        return await self.authenticate_credentials(username, password) is not None
