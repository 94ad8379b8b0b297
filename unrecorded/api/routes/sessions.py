"""Session Routes — create, look up, authenticate, log in, delete, sweep.

Invariants:
    - /authenticate returns 401 for a missing OR expired token
    - DELETE /{id} and DELETE /expired are idempotent (always 204 / 200)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_session_service
from unrecorded.core.errors import AuthenticationError, ResourceNotFoundError
from unrecorded.schemas.session import (
    SessionCreate, SessionResponse, SweepResponse, TokenBody,
)
from unrecorded.schemas.user import Credentials
from unrecorded.services.session_service import SessionService

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionCreate, sessions: SessionService = Depends(get_session_service),
):
    session = await sessions.create_session(body.user_id, body.token, body.expires_at)
    return SessionResponse.model_validate(session)


@router.post("/login", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def login(
    body: Credentials, sessions: SessionService = Depends(get_session_service),
):
    return SessionResponse.model_validate(
        await sessions.login(body.username, body.password),
    )


@router.post("/authenticate", response_model=SessionResponse)
async def authenticate(
    body: TokenBody, sessions: SessionService = Depends(get_session_service),
):
    session = await sessions.authenticate(body.token)
    if session is None:
        raise AuthenticationError("Session is missing or expired")
    return SessionResponse.model_validate(session)


@router.delete("/expired", response_model=SweepResponse)
async def sweep_expired(sessions: SessionService = Depends(get_session_service)):
    return SweepResponse(removed=await sessions.sweep_expired())


@router.get("/by-user/{user_id}", response_model=list[SessionResponse])
async def get_sessions_by_user(
    user_id: UUID, sessions: SessionService = Depends(get_session_service),
):
    return [
        SessionResponse.model_validate(s)
        for s in await sessions.get_sessions_by_user(user_id)
    ]


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: UUID, sessions: SessionService = Depends(get_session_service),
):
    session = await sessions.get_session_by_id(session_id)
    if session is None:
        raise ResourceNotFoundError("Session", str(session_id))
    return SessionResponse.model_validate(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: UUID, sessions: SessionService = Depends(get_session_service),
):
    await sessions.delete_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
