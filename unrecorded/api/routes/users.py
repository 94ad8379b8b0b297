"""User Routes — registration, lookup, profile updates, deletion.

Invariants:
    - Responses use UserResponse: password hash and salt never leave the server
    - DELETE is idempotent: deleting a missing user returns 204
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_user_service
from unrecorded.core.errors import ResourceNotFoundError
from unrecorded.schemas.user import (
    Credentials, EmailUpdate, KeysUpdate, PasswordChange, UserCreate,
    UserDeletionResponse, UserResponse, UsernameUpdate,
)
from unrecorded.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


def _found(user, key) -> UserResponse:
    if user is None:
        raise ResourceNotFoundError("User", str(key))
    return UserResponse.model_validate(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate, users: UserService = Depends(get_user_service),
):
    user = await users.create_user(
        body.username, body.password, body.email,
        body.public_key, body.private_key_encrypted,
    )
    return UserResponse.model_validate(user)


@router.get("/by-username/{username}", response_model=UserResponse)
async def get_user_by_username(
    username: str, users: UserService = Depends(get_user_service),
):
    return _found(await users.get_user_by_username(username), username)


@router.get("/by-email/{email}", response_model=UserResponse)
async def get_user_by_email(
    email: str, users: UserService = Depends(get_user_service),
):
    return _found(await users.get_user_by_email(email), email)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    return _found(await users.get_user_by_id(user_id), user_id)


@router.put("/{user_id}/username", response_model=UserResponse)
async def update_username(
    user_id: UUID, body: UsernameUpdate,
    users: UserService = Depends(get_user_service),
):
    return UserResponse.model_validate(
        await users.update_username(user_id, body.username),
    )


@router.put("/{user_id}/email", response_model=UserResponse)
async def update_email(
    user_id: UUID, body: EmailUpdate,
    users: UserService = Depends(get_user_service),
):
    return UserResponse.model_validate(await users.update_email(user_id, body.email))


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    user_id: UUID, body: PasswordChange,
    users: UserService = Depends(get_user_service),
):
    await users.change_password(user_id, body.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{user_id}/keys", response_model=UserResponse)
async def update_keys(
    user_id: UUID, body: KeysUpdate,
    users: UserService = Depends(get_user_service),
):
    return UserResponse.model_validate(
        await users.update_keys(
            user_id, body.public_key, body.private_key_encrypted,
        ),
    )


@router.post("/verify-password")
async def verify_password(
    body: Credentials, users: UserService = Depends(get_user_service),
):
    return {"valid": await users.verify_user_password(body.username, body.password)}


@router.delete("/{user_id}")
async def delete_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    """Delete the user and run the membership cascade."""
    report = await users.delete_user(user_id)
    if report is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return UserDeletionResponse(**vars(report))
