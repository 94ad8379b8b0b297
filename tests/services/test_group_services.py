"""Group & Membership Services — creation, listing, roles, removal."""

from uuid import uuid4

import pytest

from unrecorded.core.errors import (
    ConflictError, InvalidArgumentError, ResourceNotFoundError,
)
from unrecorded.services.group_service import GroupService
from unrecorded.services.membership_service import MembershipService


@pytest.fixture
def groups(store):
    return GroupService(store)


@pytest.fixture
def members(store):
    return MembershipService(store)


async def test_owner_becomes_member(make_user, groups, members):
    owner = await make_user()
    group = await groups.create_group("G", owner.id)
    listed = await members.get_members_by_group(group.id)
    assert [(m.user_id, m.role) for m in listed] == [(owner.id, "owner")]


async def test_member_role_defaults_to_member(make_user, groups, members):
    owner, joiner = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)

    member = await members.add_member_to_group(group.id, joiner.id)
    assert member.role == "member"


async def test_create_group_unknown_owner(groups):
    with pytest.raises(ResourceNotFoundError):
        await groups.create_group("G", uuid4())


async def test_create_group_invalid_name(make_user, groups):
    owner = await make_user()
    with pytest.raises(InvalidArgumentError):
        await groups.create_group(" ", owner.id)


async def test_rename_group(make_user, groups):
    owner = await make_user()
    group = await groups.create_group("Old", owner.id)
    assert (await groups.update_group_name(group.id, "New")).name == "New"


async def test_rename_missing_group(groups):
    with pytest.raises(ResourceNotFoundError):
        await groups.update_group_name(uuid4(), "New")


async def test_delete_group_removes_memberships(make_user, groups, members):
    owner, member = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    await members.add_member_to_group(group.id, member.id, "member")

    await groups.delete_group(group.id)
    assert await groups.get_group_by_id(group.id) is None
    assert await members.get_groups_by_user(member.id) == []


async def test_duplicate_membership_conflicts(make_user, groups, members):
    owner = await make_user()
    group = await groups.create_group("G", owner.id)
    with pytest.raises(ConflictError):
        await members.add_member_to_group(group.id, owner.id, "member")


async def test_add_member_unknown_group(make_user, members):
    user = await make_user()
    with pytest.raises(ResourceNotFoundError):
        await members.add_member_to_group(uuid4(), user.id, "member")


async def test_update_member_role(make_user, groups, members):
    owner, member = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    await members.add_member_to_group(group.id, member.id, "member")
    updated = await members.update_member_role(group.id, member.id, "admin")
    assert updated.role == "admin"


async def test_update_role_missing_membership(make_user, groups, members):
    owner = await make_user()
    group = await groups.create_group("G", owner.id)
    with pytest.raises(ResourceNotFoundError):
        await members.update_member_role(group.id, uuid4(), "admin")


async def test_remove_member_is_idempotent(make_user, groups, members):
    owner, member = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    await members.add_member_to_group(group.id, member.id, "member")
    assert await members.remove_member_from_group(group.id, member.id) is True
    assert await members.remove_member_from_group(group.id, member.id) is False


async def test_removing_owner_membership_keeps_owner(make_user, groups, members):
    owner = await make_user()
    group = await groups.create_group("G", owner.id)
    await members.remove_member_from_group(group.id, owner.id)
    assert (await groups.get_group_by_id(group.id)).owner_id == owner.id
