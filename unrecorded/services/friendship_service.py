"""Friendship Service — symmetric friendship links between two users.

Invariants:
    - A user can never befriend themselves (validation + table check)
    - (a, b) and (b, a) denote the same friendship: rows are stored with the
      smaller user id first, so the primary key rejects the reversed duplicate
      even when two creates race
"""

import logging
from uuid import UUID

from sqlalchemy import or_

from unrecorded.core import validation
from unrecorded.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from unrecorded.core.store_protocols import Store, StoreTransaction
from unrecorded.models.friendship import Friendship
from unrecorded.models.user import User

logger = logging.getLogger(__name__)


def friendship_key(user_id_1: UUID, user_id_2: UUID) -> tuple[UUID, UUID]:
    """Canonical (lower, higher) primary key for a pair of users."""
    if user_id_1 < user_id_2:
        return user_id_1, user_id_2
    return user_id_2, user_id_1


async def _get_pair_or_404(
    tx: StoreTransaction, user_id_1: UUID, user_id_2: UUID,
) -> Friendship:
    friendship = await tx.find(
        Friendship, friendship_key(user_id_1, user_id_2), lock=True,
    )
    if friendship is None:
        raise ResourceNotFoundError(
            "Friendship", f"{user_id_1}/{user_id_2}",
            ErrorContext(user_id=str(user_id_1)),
        )
    return friendship


class FriendshipService:
    """Friendship operations."""

    def __init__(self, store: Store):
        self.store = store

    async def create_friendship(
        self, user_id_1: UUID, user_id_2: UUID, status: str,
    ) -> Friendship:
        validation.check_user_link(user_id_1, user_id_2)
        parsed = validation.check_friendship_status(status)
        low, high = friendship_key(user_id_1, user_id_2)
        async with self.store.transaction(write=True) as tx:
            for user_id in (low, high):
                if await tx.find(User, user_id) is None:
                    raise ResourceNotFoundError(
                        "User", str(user_id), ErrorContext(user_id=str(user_id)),
                    )
            if await tx.find(Friendship, (low, high)) is not None:
                raise ConflictError("Friendship already exists.")
            friendship = await tx.persist(Friendship(
                user_id_1=low, user_id_2=high, status=parsed.value,
            ))
        logger.info("Friendship created", extra={"user_id": user_id_1})
        return friendship

    async def get_friendship(
        self, user_id_1: UUID, user_id_2: UUID,
    ) -> Friendship | None:
        async with self.store.transaction() as tx:
            return await tx.find(Friendship, friendship_key(user_id_1, user_id_2))

    async def get_friendships_for_user(self, user_id: UUID) -> list[Friendship]:
        async with self.store.transaction() as tx:
            return await tx.query(
                Friendship,
                or_(Friendship.user_id_1 == user_id,
                    Friendship.user_id_2 == user_id),
            )

    async def update_friendship_status(
        self, user_id_1: UUID, user_id_2: UUID, status: str,
    ) -> Friendship:
        parsed = validation.check_friendship_status(status)
        async with self.store.transaction(write=True) as tx:
            friendship = await _get_pair_or_404(tx, user_id_1, user_id_2)
            friendship.status = parsed.value
            friendship = await tx.merge(friendship)
        return friendship

    async def delete_friendship(self, user_id_1: UUID, user_id_2: UUID) -> None:
        async with self.store.transaction(write=True) as tx:
            friendship = await _get_pair_or_404(tx, user_id_1, user_id_2)
            await tx.remove(friendship)
        logger.info("Friendship deleted", extra={"user_id": user_id_1})
