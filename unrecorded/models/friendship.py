"""Friendship ORM — symmetric link between two distinct users.

Invariants:
    - Composite primary key (user_id_1, user_id_2) with user_id_1 < user_id_2,
      so a pair has exactly one row and the ids never match
    - status is one of FRD, PND, UNK
"""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from unrecorded.db.base import Base


class Friendship(Base):
    """Friendship between two users."""
    __tablename__ = "friendships"
    __table_args__ = (
        CheckConstraint(
            "status IN ('FRD', 'PND', 'UNK')", name="ck_friendships_status",
        ),
        CheckConstraint(
            "user_id_1 < user_id_2", name="ck_friendships_ordered_users",
        ),
    )

    user_id_1: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id_2: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    status: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
