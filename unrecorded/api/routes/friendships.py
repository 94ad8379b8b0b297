"""Friendship Routes — symmetric friendship links."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_friendship_service
from unrecorded.core.errors import ResourceNotFoundError
from unrecorded.schemas.social import (
    FriendshipCreate, FriendshipResponse, FriendshipStatusUpdate,
)
from unrecorded.services.friendship_service import FriendshipService

router = APIRouter(prefix="/api/v1/friendships", tags=["friendships"])


@router.post("", response_model=FriendshipResponse, status_code=status.HTTP_201_CREATED)
async def create_friendship(
    body: FriendshipCreate,
    friendships: FriendshipService = Depends(get_friendship_service),
):
    return FriendshipResponse.model_validate(
        await friendships.create_friendship(
            body.user_id_1, body.user_id_2, body.status,
        ),
    )


@router.get("/by-user/{user_id}", response_model=list[FriendshipResponse])
async def get_friendships_for_user(
    user_id: UUID, friendships: FriendshipService = Depends(get_friendship_service),
):
    return [
        FriendshipResponse.model_validate(f)
        for f in await friendships.get_friendships_for_user(user_id)
    ]


@router.get("/{user_id_1}/{user_id_2}", response_model=FriendshipResponse)
async def get_friendship(
    user_id_1: UUID, user_id_2: UUID,
    friendships: FriendshipService = Depends(get_friendship_service),
):
    friendship = await friendships.get_friendship(user_id_1, user_id_2)
    if friendship is None:
        raise ResourceNotFoundError("Friendship", f"{user_id_1}/{user_id_2}")
    return FriendshipResponse.model_validate(friendship)


@router.put("/{user_id_1}/{user_id_2}/status", response_model=FriendshipResponse)
async def update_friendship_status(
    user_id_1: UUID, user_id_2: UUID, body: FriendshipStatusUpdate,
    friendships: FriendshipService = Depends(get_friendship_service),
):
    return FriendshipResponse.model_validate(
        await friendships.update_friendship_status(
            user_id_1, user_id_2, body.status,
        ),
    )


@router.delete("/{user_id_1}/{user_id_2}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_friendship(
    user_id_1: UUID, user_id_2: UUID,
    friendships: FriendshipService = Depends(get_friendship_service),
):
    await friendships.delete_friendship(user_id_1, user_id_2)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
