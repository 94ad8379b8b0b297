"""Message ORM — direct or group message with opaque encrypted content.

Invariants:
    - Created with exactly one of recipient_id / group_id (core/validation.py);
      the table only forbids both being set, because removing a recipient
      clears recipient_id
    - deleted_sender / deleted_recipient are audit markers: set once by the
      user-deletion cascade, never cleared
    - is_deleted is the user-facing soft delete; the row is never re-created

Design Decisions:
    - deleted_* columns carry no FK: they must outlive the referenced user
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from unrecorded.db.base import Base


class Message(Base):
    """Chat message."""
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint(
            "recipient_id IS NULL OR group_id IS NULL",
            name="ck_messages_single_target",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    sender_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    deleted_sender: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True,
    )
    recipient_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    deleted_recipient: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True,
    )
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    is_group: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    content_encrypted: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
