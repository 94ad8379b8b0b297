"""Group ORM — named chat group with a single owner.

Invariants:
    - owner_id always resolves to an existing user while the group exists
    - owner_id only changes through update_group_owner (new owner must be a
      member) or the user-deletion cascade (successor is a remaining member)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from unrecorded.core.domain_types import GROUP_NAME_MAX_LENGTH
from unrecorded.db.base import Base


class Group(Base):
    """Chat group."""
    __tablename__ = "groups"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(GROUP_NAME_MAX_LENGTH), nullable=False,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
