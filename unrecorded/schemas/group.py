"""Group Schemas — groups and memberships."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from unrecorded.core.domain_types import MEMBER_ROLE


class GroupCreate(BaseModel):
    name: str
    owner_id: UUID


class GroupNameUpdate(BaseModel):
    name: str


class GroupOwnerUpdate(BaseModel):
    new_owner_id: UUID


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    owner_id: UUID
    created_at: datetime


class MemberCreate(BaseModel):
    group_id: UUID
    user_id: UUID
    role: str = MEMBER_ROLE


class MemberRoleUpdate(BaseModel):
    role: str


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_id: UUID
    user_id: UUID
    role: str
    joined_at: datetime
