"""Notification Routes — per-user notifications and housekeeping trigger.

Invariants:
    - POST /housekeeping is the only trigger for read/orphan cleanup
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_notification_service
from unrecorded.core.errors import ResourceNotFoundError
from unrecorded.schemas.social import (
    DeletedCount, NotificationCreate, NotificationReadUpdate, NotificationResponse,
)
from unrecorded.services.notification_service import NotificationService

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: NotificationCreate,
    notifications: NotificationService = Depends(get_notification_service),
):
    return NotificationResponse.model_validate(
        await notifications.create_notification(body.user_id, body.type, body.content),
    )


@router.post("/housekeeping", response_model=DeletedCount)
async def notification_housekeeping(
    notifications: NotificationService = Depends(get_notification_service),
):
    return DeletedCount(deleted=await notifications.notification_housekeeping())


@router.get("/by-user/{user_id}", response_model=list[NotificationResponse])
async def get_notifications_by_user(
    user_id: UUID, unread_only: bool = False,
    notifications: NotificationService = Depends(get_notification_service),
):
    if unread_only:
        found = await notifications.get_unread_notifications_by_user(user_id)
    else:
        found = await notifications.get_notifications_by_user(user_id)
    return [NotificationResponse.model_validate(n) for n in found]


@router.delete("/by-user/{user_id}", response_model=DeletedCount)
async def delete_notifications_by_user(
    user_id: UUID,
    notifications: NotificationService = Depends(get_notification_service),
):
    return DeletedCount(
        deleted=await notifications.delete_notifications_by_user(user_id),
    )


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: UUID,
    notifications: NotificationService = Depends(get_notification_service),
):
    notification = await notifications.get_notification_by_id(notification_id)
    if notification is None:
        raise ResourceNotFoundError("Notification", str(notification_id))
    return NotificationResponse.model_validate(notification)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def update_read_status(
    notification_id: UUID, body: NotificationReadUpdate,
    notifications: NotificationService = Depends(get_notification_service),
):
    return NotificationResponse.model_validate(
        await notifications.update_notification_read_status(
            notification_id, body.is_read,
        ),
    )


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    notifications: NotificationService = Depends(get_notification_service),
):
    await notifications.delete_notification(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
