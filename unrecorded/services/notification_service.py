"""Notification Service — per-user notifications and their housekeeping.

Invariants:
    - delete_notification and delete_notifications_by_user are idempotent
    - notification_housekeeping removes read notifications and notifications
      whose user no longer exists, in one set-based delete

Design Decisions:
    - Housekeeping replaces the scheduled database job: it is triggered by an
      API call (or an external scheduler hitting that endpoint)
"""

import logging
from uuid import UUID

from sqlalchemy import or_, select

from unrecorded.core import validation
from unrecorded.core.errors import ErrorContext, ResourceNotFoundError
from unrecorded.core.store_protocols import Store
from unrecorded.models.notification import Notification
from unrecorded.models.user import User

logger = logging.getLogger(__name__)


class NotificationService:
    """Notification operations."""

    def __init__(self, store: Store):
        self.store = store

    async def create_notification(
        self, user_id: UUID, notification_type: str, content: str,
    ) -> Notification:
        validation.check_notification_type(notification_type)
        async with self.store.transaction(write=True) as tx:
            if await tx.find(User, user_id) is None:
                raise ResourceNotFoundError(
                    "User", str(user_id), ErrorContext(user_id=str(user_id)),
                )
            notification = await tx.persist(Notification(
                user_id=user_id, type=notification_type, content=content,
            ))
        return notification

    async def get_notification_by_id(
        self, notification_id: UUID,
    ) -> Notification | None:
        async with self.store.transaction() as tx:
            return await tx.find(Notification, notification_id)

    async def get_notifications_by_user(self, user_id: UUID) -> list[Notification]:
        async with self.store.transaction() as tx:
            return await tx.query(
                Notification, Notification.user_id == user_id,
                order_by=Notification.timestamp,
            )

    async def get_unread_notifications_by_user(
        self, user_id: UUID,
    ) -> list[Notification]:
        async with self.store.transaction() as tx:
            return await tx.query(
                Notification,
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
                order_by=Notification.timestamp,
            )

    async def update_notification_read_status(
        self, notification_id: UUID, is_read: bool,
    ) -> Notification:
        async with self.store.transaction(write=True) as tx:
            notification = await tx.find(Notification, notification_id, lock=True)
            if notification is None:
                raise ResourceNotFoundError("Notification", str(notification_id))
            notification.is_read = is_read
            notification = await tx.merge(notification)
        return notification

    async def delete_notification(self, notification_id: UUID) -> bool:
        async with self.store.transaction(write=True) as tx:
            removed = await tx.remove_where(
                Notification, Notification.id == notification_id,
            )
        return removed > 0

    async def delete_notifications_by_user(self, user_id: UUID) -> int:
        async with self.store.transaction(write=True) as tx:
            return await tx.remove_where(
                Notification, Notification.user_id == user_id,
            )

    async def notification_housekeeping(self) -> int:
        """Delete read and orphaned notifications; returns the count removed."""
        orphaned = ~(
            select(User.id)
            .where(User.id == Notification.user_id)
            .correlate(Notification)
            .exists()
        )
        async with self.store.transaction(write=True) as tx:
            removed = await tx.remove_where(
                Notification, or_(Notification.is_read.is_(True), orphaned),
            )
        logger.info(
            f"Notification housekeeping removed {removed} notifications",
            extra={"operation": "notification_housekeeping"},
        )
        return removed
