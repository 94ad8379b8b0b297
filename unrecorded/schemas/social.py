"""Social Schemas — friendships and notifications."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from unrecorded.core.domain_types import FriendshipStatus


class FriendshipCreate(BaseModel):
    user_id_1: UUID
    user_id_2: UUID
    status: str = FriendshipStatus.PENDING.value


class FriendshipStatusUpdate(BaseModel):
    status: str


class FriendshipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id_1: UUID
    user_id_2: UUID
    status: FriendshipStatus


class NotificationCreate(BaseModel):
    user_id: UUID
    type: str
    content: str


class NotificationReadUpdate(BaseModel):
    is_read: bool


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: str
    content: str
    is_read: bool
    timestamp: datetime


class DeletedCount(BaseModel):
    deleted: int
