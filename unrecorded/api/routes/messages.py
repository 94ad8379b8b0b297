"""Message Routes — direct and group messages."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_message_service
from unrecorded.core.errors import ResourceNotFoundError
from unrecorded.schemas.message import (
    MessageContentUpdate, MessageCreate, MessageResponse,
)
from unrecorded.services.message_service import MessageService

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message(
    body: MessageCreate, messages: MessageService = Depends(get_message_service),
):
    message = await messages.create_message(
        body.sender_id, body.content_encrypted,
        recipient_id=body.recipient_id, group_id=body.group_id,
        is_group=body.is_group,
    )
    return MessageResponse.model_validate(message)


@router.get("/between/{user_id_1}/{user_id_2}", response_model=list[MessageResponse])
async def get_messages_between_users(
    user_id_1: UUID, user_id_2: UUID,
    messages: MessageService = Depends(get_message_service),
):
    return [
        MessageResponse.model_validate(m)
        for m in await messages.get_messages_between_users(user_id_1, user_id_2)
    ]


@router.get("/group/{group_id}", response_model=list[MessageResponse])
async def get_messages_for_group(
    group_id: UUID, messages: MessageService = Depends(get_message_service),
):
    return [
        MessageResponse.model_validate(m)
        for m in await messages.get_messages_for_group(group_id)
    ]


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: UUID, messages: MessageService = Depends(get_message_service),
):
    message = await messages.get_message_by_id(message_id)
    if message is None:
        raise ResourceNotFoundError("Message", str(message_id))
    return MessageResponse.model_validate(message)


@router.put("/{message_id}/content", response_model=MessageResponse)
async def update_message_content(
    message_id: UUID, body: MessageContentUpdate,
    messages: MessageService = Depends(get_message_service),
):
    return MessageResponse.model_validate(
        await messages.update_message_content(message_id, body.content_encrypted),
    )


@router.put("/{message_id}/deleted", response_model=MessageResponse)
async def mark_message_deleted(
    message_id: UUID, messages: MessageService = Depends(get_message_service),
):
    return MessageResponse.model_validate(
        await messages.mark_message_deleted(message_id),
    )


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: UUID, messages: MessageService = Depends(get_message_service),
):
    await messages.delete_message(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
