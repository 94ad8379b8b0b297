"""Membership Service — adding, listing, re-roling and removing group members.

Invariants:
    - remove_member_from_group is a plain delete: it NEVER changes
      Group.owner_id, even when the removed user is the owner
    - remove_member_from_group is idempotent
"""

import logging
from uuid import UUID

from unrecorded.core import validation
from unrecorded.core.domain_types import MEMBER_ROLE
from unrecorded.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from unrecorded.core.store_protocols import Store
from unrecorded.models.group import Group
from unrecorded.models.group_member import GroupMember
from unrecorded.models.user import User

logger = logging.getLogger(__name__)


class MembershipService:
    """Group membership operations."""

    def __init__(self, store: Store):
        self.store = store

    async def add_member_to_group(
        self, group_id: UUID, user_id: UUID, role: str = MEMBER_ROLE,
    ) -> GroupMember:
        validation.check_group_role(role)
        async with self.store.transaction(write=True) as tx:
            if await tx.find(Group, group_id) is None:
                raise ResourceNotFoundError(
                    "Group", str(group_id), ErrorContext(group_id=str(group_id)),
                )
            if await tx.find(User, user_id) is None:
                raise ResourceNotFoundError(
                    "User", str(user_id), ErrorContext(user_id=str(user_id)),
                )
            if await tx.find(GroupMember, (group_id, user_id)) is not None:
                raise ConflictError("User is already a member of this group.")
            member = await tx.persist(GroupMember(
                group_id=group_id, user_id=user_id, role=role,
            ))
        logger.info(
            "Member added",
            extra={"group_id": group_id, "user_id": user_id},
        )
        return member

    async def get_members_by_group(self, group_id: UUID) -> list[GroupMember]:
        async with self.store.transaction() as tx:
            return await tx.query(
                GroupMember, GroupMember.group_id == group_id,
                order_by=GroupMember.joined_at,
            )

    async def get_groups_by_user(self, user_id: UUID) -> list[GroupMember]:
        async with self.store.transaction() as tx:
            return await tx.query(
                GroupMember, GroupMember.user_id == user_id,
                order_by=GroupMember.joined_at,
            )

    async def update_member_role(
        self, group_id: UUID, user_id: UUID, role: str,
    ) -> GroupMember:
        validation.check_group_role(role)
        async with self.store.transaction(write=True) as tx:
            member = await tx.find(GroupMember, (group_id, user_id), lock=True)
            if member is None:
                raise ResourceNotFoundError(
                    "GroupMember", f"{group_id}/{user_id}",
                    ErrorContext(group_id=str(group_id), user_id=str(user_id)),
                )
            member.role = role
            member = await tx.merge(member)
        return member

    async def remove_member_from_group(self, group_id: UUID, user_id: UUID) -> bool:
        async with self.store.transaction(write=True) as tx:
            removed = await tx.remove_where(
                GroupMember,
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id,
            )
        if removed:
            logger.info(
                "Member removed",
                extra={"group_id": group_id, "user_id": user_id},
            )
        return removed > 0
