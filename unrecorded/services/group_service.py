"""Group Service — group creation, lookup, rename, ownership transfer, deletion.

Invariants:
    - A new group's owner is inserted as a member with role "owner" in the
      same transaction as the group
    - update_group_owner checks membership and writes in ONE transaction
    - delete_group removes memberships, group messages and their reactions
"""

import logging
from uuid import UUID

from unrecorded.core import validation
from unrecorded.core.domain_types import OWNER_ROLE
from unrecorded.core.errors import ErrorContext, ResourceNotFoundError
from unrecorded.core.store_protocols import Store, StoreTransaction
from unrecorded.models.group import Group
from unrecorded.models.group_member import GroupMember
from unrecorded.models.user import User
from unrecorded.services.membership_consistency import (
    remove_group, transfer_group_ownership,
)

logger = logging.getLogger(__name__)


async def _get_group_or_404(
    tx: StoreTransaction, group_id: UUID, lock: bool = False,
) -> Group:
    group = await tx.find(Group, group_id, lock=lock)
    if group is None:
        raise ResourceNotFoundError(
            "Group", str(group_id), ErrorContext(group_id=str(group_id)),
        )
    return group


class GroupService:
    """Group lifecycle."""

    def __init__(self, store: Store):
        self.store = store

    async def create_group(self, name: str, owner_id: UUID) -> Group:
        validation.check_group_name(name)
        async with self.store.transaction(write=True) as tx:
            if await tx.find(User, owner_id) is None:
                raise ResourceNotFoundError(
                    "User", str(owner_id), ErrorContext(user_id=str(owner_id)),
                )
            group = await tx.persist(Group(name=name, owner_id=owner_id))
            await tx.persist(GroupMember(
                group_id=group.id, user_id=owner_id, role=OWNER_ROLE,
            ))
        logger.info(
            f"Group created: {name}",
            extra={"group_id": group.id, "user_id": owner_id},
        )
        return group

    async def get_group_by_id(self, group_id: UUID) -> Group | None:
        async with self.store.transaction() as tx:
            return await tx.find(Group, group_id)

    async def get_groups_by_owner(self, owner_id: UUID) -> list[Group]:
        async with self.store.transaction() as tx:
            return await tx.query(
                Group, Group.owner_id == owner_id, order_by=Group.created_at,
            )

    async def update_group_name(self, group_id: UUID, name: str) -> Group:
        validation.check_group_name(name)
        async with self.store.transaction(write=True) as tx:
            group = await _get_group_or_404(tx, group_id, lock=True)
            group.name = name
            group = await tx.merge(group)
        return group

    async def update_group_owner(self, group_id: UUID, new_owner_id: UUID) -> Group:
        """Transfer ownership; the new owner must already be a member."""
        group = await self.store.execute_transaction(
            True, lambda tx: transfer_group_ownership(tx, group_id, new_owner_id),
        )
        logger.info(
            "Group ownership transferred",
            extra={"group_id": group_id, "user_id": new_owner_id},
        )
        return group

    async def delete_group(self, group_id: UUID) -> None:
        async with self.store.transaction(write=True) as tx:
            group = await _get_group_or_404(tx, group_id, lock=True)
            await remove_group(tx, group)
        logger.info("Group deleted", extra={"group_id": group_id})
