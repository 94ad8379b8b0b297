"""Group Member Routes — membership add/list/re-role/remove.

Invariants:
    - DELETE never changes group ownership and is idempotent (always 204)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from unrecorded.api.dependencies import get_membership_service
from unrecorded.schemas.group import MemberCreate, MemberResponse, MemberRoleUpdate
from unrecorded.services.membership_service import MembershipService

router = APIRouter(prefix="/api/v1/group-members", tags=["group-members"])


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    body: MemberCreate,
    members: MembershipService = Depends(get_membership_service),
):
    return MemberResponse.model_validate(
        await members.add_member_to_group(body.group_id, body.user_id, body.role),
    )


@router.get("/by-group/{group_id}", response_model=list[MemberResponse])
async def get_members_by_group(
    group_id: UUID, members: MembershipService = Depends(get_membership_service),
):
    return [
        MemberResponse.model_validate(m)
        for m in await members.get_members_by_group(group_id)
    ]


@router.get("/by-user/{user_id}", response_model=list[MemberResponse])
async def get_groups_by_user(
    user_id: UUID, members: MembershipService = Depends(get_membership_service),
):
    return [
        MemberResponse.model_validate(m)
        for m in await members.get_groups_by_user(user_id)
    ]


@router.put("/{group_id}/{user_id}/role", response_model=MemberResponse)
async def update_member_role(
    group_id: UUID, user_id: UUID, body: MemberRoleUpdate,
    members: MembershipService = Depends(get_membership_service),
):
    return MemberResponse.model_validate(
        await members.update_member_role(group_id, user_id, body.role),
    )


@router.delete("/{group_id}/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    group_id: UUID, user_id: UUID,
    members: MembershipService = Depends(get_membership_service),
):
    await members.remove_member_from_group(group_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
