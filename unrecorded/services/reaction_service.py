"""Reaction Service — emoji reactions on messages (create/list/delete only)."""

import logging
from uuid import UUID

from unrecorded.core import validation
from unrecorded.core.errors import ConflictError, ResourceNotFoundError
from unrecorded.core.store_protocols import Store
from unrecorded.models.message import Message
from unrecorded.models.reaction import Reaction
from unrecorded.models.user import User

logger = logging.getLogger(__name__)


class ReactionService:
    def __init__(self, store: Store):
        self.store = store

    async def create_reaction(
        self, user_id: UUID, message_id: UUID, emoji: str,
    ) -> Reaction:
        validation.check_emoji(emoji)
        async with self.store.transaction(write=True) as tx:
            if await tx.find(User, user_id) is None:
                raise ResourceNotFoundError("User", str(user_id))
            if await tx.find(Message, message_id) is None:
                raise ResourceNotFoundError("Message", str(message_id))
            if await tx.find(Reaction, (user_id, message_id, emoji)) is not None:
                raise ConflictError("Reaction already exists.")
            reaction = await tx.persist(Reaction(
                user_id=user_id, message_id=message_id, emoji=emoji,
            ))
        return reaction

    async def get_reaction(
        self, user_id: UUID, message_id: UUID, emoji: str,
    ) -> Reaction | None:
        async with self.store.transaction() as tx:
            return await tx.find(Reaction, (user_id, message_id, emoji))

    async def get_reactions_for_message(self, message_id: UUID) -> list[Reaction]:
        async with self.store.transaction() as tx:
            return await tx.query(Reaction, Reaction.message_id == message_id)

    async def delete_reaction(
        self, user_id: UUID, message_id: UUID, emoji: str,
    ) -> bool:
        async with self.store.transaction(write=True) as tx:
            removed = await tx.remove_where(
                Reaction,
                Reaction.user_id == user_id,
                Reaction.message_id == message_id,
                Reaction.emoji == emoji,
            )
        return removed > 0
