"""Reaction Routes — emoji reactions on messages."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_reaction_service
from unrecorded.core.errors import ResourceNotFoundError
from unrecorded.schemas.message import ReactionCreate, ReactionResponse
from unrecorded.services.reaction_service import ReactionService

router = APIRouter(prefix="/api/v1/reactions", tags=["reactions"])


@router.post("", response_model=ReactionResponse, status_code=status.HTTP_201_CREATED)
async def create_reaction(
    body: ReactionCreate, reactions: ReactionService = Depends(get_reaction_service),
):
    return ReactionResponse.model_validate(
        await reactions.create_reaction(body.user_id, body.message_id, body.emoji),
    )


@router.get("/message/{message_id}", response_model=list[ReactionResponse])
async def get_reactions_for_message(
    message_id: UUID, reactions: ReactionService = Depends(get_reaction_service),
):
    return [
        ReactionResponse.model_validate(r)
        for r in await reactions.get_reactions_for_message(message_id)
    ]


@router.get("/{user_id}/{message_id}/{emoji}", response_model=ReactionResponse)
async def get_reaction(
    user_id: UUID, message_id: UUID, emoji: str,
    reactions: ReactionService = Depends(get_reaction_service),
):
    reaction = await reactions.get_reaction(user_id, message_id, emoji)
    if reaction is None:
        raise ResourceNotFoundError("Reaction", f"{user_id}/{message_id}/{emoji}")
    return ReactionResponse.model_validate(reaction)


@router.delete("/{user_id}/{message_id}/{emoji}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reaction(
    user_id: UUID, message_id: UUID, emoji: str,
    reactions: ReactionService = Depends(get_reaction_service),
):
    await reactions.delete_reaction(user_id, message_id, emoji)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
