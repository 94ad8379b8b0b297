"""GroupMember ORM — join entity recording a user's participation in a group.

Invariants:
    - Composite primary key (group_id, user_id): at most one membership per pair
    - joined_at orders members for successor selection
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from unrecorded.core.domain_types import GROUP_ROLE_MAX_LENGTH
from unrecorded.db.base import Base


class GroupMember(Base):
    """Membership of one user in one group."""
    __tablename__ = "group_members"

    group_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    role: Mapped[str] = mapped_column(
        String(GROUP_ROLE_MAX_LENGTH), nullable=False,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
