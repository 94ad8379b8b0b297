"""Session Schemas — authentication session bodies and responses.

Invariants:
    - expires_at must carry a timezone offset or is interpreted as UTC
      (core/session_rules.py); "strictly in the future" is enforced by the service
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class SessionCreate(BaseModel):
    user_id: UUID
    token: str
    expires_at: datetime


class TokenBody(BaseModel):
    token: str


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    token: str
    expires_at: datetime
    created_at: datetime


class SweepResponse(BaseModel):
    removed: bool
