"""User Schemas — request bodies and public user representation.

Invariants:
    - UserResponse never carries password_hash or password_salt
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserCreate(BaseModel):
    username: str
    password: str
    email: str
    public_key: str
    private_key_encrypted: str


class UsernameUpdate(BaseModel):
    username: str


class EmailUpdate(BaseModel):
    email: str


class PasswordChange(BaseModel):
    password: str


class KeysUpdate(BaseModel):
    public_key: str
    private_key_encrypted: str


class Credentials(BaseModel):
    """Username/password pair for login and password verification."""
    username: str
    password: str


class UserResponse(BaseModel):
    """Public-facing user data (no credential material)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    public_key: str
    private_key_encrypted: str
    created_at: datetime


class UserDeletionResponse(BaseModel):
    user_id: UUID
    sent_messages_marked: int
    received_messages_marked: int
    groups_reassigned: dict[UUID, UUID]
    groups_deleted: list[UUID]
    sessions_removed: int
    memberships_removed: int
