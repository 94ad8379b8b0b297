"""Message Schemas — messages and reactions.

Invariants:
    - Target consistency (recipient XOR group, matching is_group) is checked
      by core/validation.py, not here, so the error carries the offending field
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class MessageCreate(BaseModel):
    sender_id: UUID
    recipient_id: UUID | None = None
    group_id: UUID | None = None
    is_group: bool = False
    content_encrypted: str


class MessageContentUpdate(BaseModel):
    content_encrypted: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID | None
    deleted_sender: UUID | None
    recipient_id: UUID | None
    deleted_recipient: UUID | None
    group_id: UUID | None
    is_group: bool
    content_encrypted: str
    timestamp: datetime
    is_deleted: bool


class ReactionCreate(BaseModel):
    user_id: UUID
    message_id: UUID
    emoji: str


class ReactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    message_id: UUID
    emoji: str
