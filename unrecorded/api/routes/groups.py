"""Group Routes — group CRUD and ownership transfer."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_group_service
from unrecorded.core.errors import ResourceNotFoundError
from unrecorded.schemas.group import (
    GroupCreate, GroupNameUpdate, GroupOwnerUpdate, GroupResponse,
)
from unrecorded.services.group_service import GroupService

router = APIRouter(prefix="/api/v1/groups", tags=["groups"])


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    body: GroupCreate, groups: GroupService = Depends(get_group_service),
):
    return GroupResponse.model_validate(
        await groups.create_group(body.name, body.owner_id),
    )


@router.get("/by-owner/{owner_id}", response_model=list[GroupResponse])
async def get_groups_by_owner(
    owner_id: UUID, groups: GroupService = Depends(get_group_service),
):
    return [
        GroupResponse.model_validate(g)
        for g in await groups.get_groups_by_owner(owner_id)
    ]


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(group_id: UUID, groups: GroupService = Depends(get_group_service)):
    group = await groups.get_group_by_id(group_id)
    if group is None:
        raise ResourceNotFoundError("Group", str(group_id))
    return GroupResponse.model_validate(group)


@router.put("/{group_id}/name", response_model=GroupResponse)
async def update_group_name(
    group_id: UUID, body: GroupNameUpdate,
    groups: GroupService = Depends(get_group_service),
):
    return GroupResponse.model_validate(
        await groups.update_group_name(group_id, body.name),
    )


@router.put("/{group_id}/owner", response_model=GroupResponse)
async def update_group_owner(
    group_id: UUID, body: GroupOwnerUpdate,
    groups: GroupService = Depends(get_group_service),
):
    return GroupResponse.model_validate(
        await groups.update_group_owner(group_id, body.new_owner_id),
    )


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: UUID, groups: GroupService = Depends(get_group_service),
):
    await groups.delete_group(group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
