"""User ORM — account identity, credentials and key material.

Invariants:
    - username, email and public_key are globally unique
    - password_hash/password_salt are written only by the user service via
      core/credentials.py and never serialized by the API
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, LargeBinary, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from unrecorded.core.domain_types import EMAIL_MAX_LENGTH, USERNAME_MAX_LENGTH
from unrecorded.db.base import Base


class User(Base):
    """Registered user account."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH), nullable=False, unique=True, index=True,
    )
    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    password_salt: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    public_key: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    private_key_encrypted: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
