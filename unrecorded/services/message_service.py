"""Message Service — direct and group messages with opaque encrypted content.

Invariants:
    - A message is created with exactly one target (recipient XOR group),
      consistent with is_group
    - Content is never inspected or logged
    - mark_message_deleted is a soft delete; delete_message removes the row
      and its reactions
"""

import logging
from uuid import UUID

from sqlalchemy import and_, or_

from unrecorded.core import validation
from unrecorded.core.errors import ErrorContext, ResourceNotFoundError
from unrecorded.core.store_protocols import Store, StoreTransaction
from unrecorded.models.group import Group
from unrecorded.models.message import Message
from unrecorded.models.reaction import Reaction
from unrecorded.models.user import User

logger = logging.getLogger(__name__)


async def _require(tx: StoreTransaction, model: type, key: UUID, label: str) -> None:
    if await tx.find(model, key) is None:
        raise ResourceNotFoundError(label, str(key))


async def _get_message_or_404(tx: StoreTransaction, message_id: UUID) -> Message:
    message = await tx.find(Message, message_id, lock=True)
    if message is None:
        raise ResourceNotFoundError("Message", str(message_id))
    return message


class MessageService:
    """Message operations."""

    def __init__(self, store: Store):
        self.store = store

    async def create_message(
        self,
        sender_id: UUID,
        content_encrypted: str,
        recipient_id: UUID | None = None,
        group_id: UUID | None = None,
        is_group: bool = False,
    ) -> Message:
        validation.check_message_target(recipient_id, group_id, is_group)
        validation.check_message_content(content_encrypted)
        if recipient_id is not None:
            validation.check_user_link(sender_id, recipient_id)

        async with self.store.transaction(write=True) as tx:
            await _require(tx, User, sender_id, "User")
            if is_group:
                await _require(tx, Group, group_id, "Group")
            else:
                await _require(tx, User, recipient_id, "User")
            message = await tx.persist(Message(
                sender_id=sender_id,
                recipient_id=recipient_id,
                group_id=group_id,
                is_group=is_group,
                content_encrypted=content_encrypted,
            ))
        logger.debug(
            "Message created",
            extra={"user_id": sender_id, "group_id": group_id},
        )
        return message

    async def get_message_by_id(self, message_id: UUID) -> Message | None:
        async with self.store.transaction() as tx:
            return await tx.find(Message, message_id)

    async def get_messages_between_users(
        self, user_id_1: UUID, user_id_2: UUID,
    ) -> list[Message]:
        """Direct messages in both directions, oldest first."""
        async with self.store.transaction() as tx:
            return await tx.query(
                Message,
                Message.is_group.is_(False),
                or_(
                    and_(Message.sender_id == user_id_1,
                         Message.recipient_id == user_id_2),
                    and_(Message.sender_id == user_id_2,
                         Message.recipient_id == user_id_1),
                ),
                order_by=Message.timestamp,
            )

    async def get_messages_for_group(self, group_id: UUID) -> list[Message]:
        async with self.store.transaction() as tx:
            return await tx.query(
                Message, Message.group_id == group_id,
                order_by=Message.timestamp,
            )

    async def update_message_content(
        self, message_id: UUID, content_encrypted: str,
    ) -> Message:
        validation.check_message_content(content_encrypted)
        async with self.store.transaction(write=True) as tx:
            message = await _get_message_or_404(tx, message_id)
            message.content_encrypted = content_encrypted
            message = await tx.merge(message)
        return message

    async def delete_message(self, message_id: UUID) -> None:
        async with self.store.transaction(write=True) as tx:
            message = await _get_message_or_404(tx, message_id)
            await tx.remove_where(Reaction, Reaction.message_id == message_id)
            await tx.remove(message)

    async def mark_message_deleted(self, message_id: UUID) -> Message:
        async with self.store.transaction(write=True) as tx:
            message = await _get_message_or_404(tx, message_id)
            message.is_deleted = True
            message = await tx.merge(message)
        return message
