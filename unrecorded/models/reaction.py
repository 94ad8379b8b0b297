"""Reaction ORM — one emoji from one user on one message.

Invariants:
    - Composite primary key (user_id, message_id, emoji)
    - Create/delete only, never updated
"""

import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from unrecorded.core.domain_types import EMOJI_MAX_LENGTH
from unrecorded.db.base import Base


class Reaction(Base):
    """Emoji reaction."""
    __tablename__ = "reactions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    message_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("messages.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    emoji: Mapped[str] = mapped_column(
        String(EMOJI_MAX_LENGTH), primary_key=True,
    )
