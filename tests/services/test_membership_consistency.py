"""Membership Consistency — user-deletion cascade and ownership transfer.

Tests:
    - Direct membership removal never changes the owner
    - Deleting an owner reassigns each owned group to a remaining member,
      or deletes the group when none remain
    - Messages survive deletion with deleted_sender / deleted_recipient set
    - update_group_owner requires membership and leaves the owner unchanged on failure
    - Dependent rows (sessions, friendships, reactions, notifications) are removed
    - The cascade locks what it reads; a successor whose membership vanished is
      skipped for the next member, or the group is deleted
    - A failing cascade rolls back as a whole
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from tests.services.conftest import FIXED_NOW, later
from unrecorded.core.errors import InvalidArgumentError, ResourceNotFoundError
from unrecorded.models.group import Group
from unrecorded.models.group_member import GroupMember
from unrecorded.services import membership_consistency
from unrecorded.services.membership_consistency import cascade_user_deletion
from unrecorded.services.friendship_service import FriendshipService
from unrecorded.services.group_service import GroupService
from unrecorded.services.membership_service import MembershipService
from unrecorded.services.message_service import MessageService
from unrecorded.services.notification_service import NotificationService
from unrecorded.services.reaction_service import ReactionService
from unrecorded.services.session_service import SessionService


@pytest.fixture
def groups(store):
    return GroupService(store)


@pytest.fixture
def members(store):
    return MembershipService(store)


async def _join(store, group_id, user_id, joined_at):
    async with store.transaction(write=True) as tx:
        await tx.persist(GroupMember(
            group_id=group_id, user_id=user_id, role="member", joined_at=joined_at,
        ))


async def test_team_scenario(make_user, users, groups, members):
    """U1 owns Team with U2; removing U1's membership keeps U1 as owner,
    deleting U1 hands Team to U2."""
    u1, u2 = await make_user("u1"), await make_user("u2")
    team = await groups.create_group("Team", u1.id)
    await members.add_member_to_group(team.id, u2.id, "member")

    await members.remove_member_from_group(team.id, u1.id)
    assert (await groups.get_group_by_id(team.id)).owner_id == u1.id

    report = await users.delete_user(u1.id)
    assert report.groups_reassigned == {team.id: u2.id}
    assert (await groups.get_group_by_id(team.id)).owner_id == u2.id
    assert await users.get_user_by_id(u1.id) is None


async def test_sole_member_group_is_deleted_with_owner(make_user, users, groups):
    u1 = await make_user()
    solo = await groups.create_group("Solo", u1.id)

    report = await users.delete_user(u1.id)
    assert report.groups_deleted == [solo.id]
    assert await groups.get_group_by_id(solo.id) is None


async def test_successor_is_longest_standing_member(
    make_user, users, groups, store,
):
    owner, early, late = await make_user(), await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    base = datetime.now(timezone.utc) + timedelta(days=1)
    await _join(store, group.id, late.id, base + timedelta(hours=2))
    await _join(store, group.id, early.id, base + timedelta(hours=1))

    await users.delete_user(owner.id)
    assert (await groups.get_group_by_id(group.id)).owner_id == early.id


async def test_every_owned_group_resolved(make_user, users, groups, members):
    owner, other = await make_user(), await make_user()
    shared = await groups.create_group("Shared", owner.id)
    lonely = await groups.create_group("Lonely", owner.id)
    await members.add_member_to_group(shared.id, other.id, "member")

    await users.delete_user(owner.id)
    assert (await groups.get_group_by_id(shared.id)).owner_id == other.id
    assert await groups.get_group_by_id(lonely.id) is None
    assert await groups.get_groups_by_owner(owner.id) == []


async def test_messages_keep_deletion_markers(make_user, users, store):
    alice, bob = await make_user(), await make_user()
    messages = MessageService(store)
    sent = await messages.create_message(alice.id, "c1", recipient_id=bob.id)
    received = await messages.create_message(bob.id, "c2", recipient_id=alice.id)

    await users.delete_user(alice.id)

    sent = await messages.get_message_by_id(sent.id)
    assert sent.sender_id is None
    assert sent.deleted_sender == alice.id
    assert sent.recipient_id == bob.id

    received = await messages.get_message_by_id(received.id)
    assert received.recipient_id is None
    assert received.deleted_recipient == alice.id
    assert received.sender_id == bob.id


async def test_dependent_rows_removed(make_user, users, store):
    alice, bob = await make_user(), await make_user()
    sessions = SessionService(store, users, clock=lambda: FIXED_NOW)
    friendships = FriendshipService(store)
    notifications = NotificationService(store)
    reactions = ReactionService(store)
    message = await MessageService(store).create_message(
        bob.id, "hello", recipient_id=alice.id,
    )

    await sessions.create_session(alice.id, "tok", later())
    await friendships.create_friendship(bob.id, alice.id, "FRD")
    await notifications.create_notification(alice.id, "friend", "hi")
    await reactions.create_reaction(alice.id, message.id, "👍")

    report = await users.delete_user(alice.id)
    assert report.sessions_removed == 1
    assert await sessions.get_session_by_token("tok") is None
    assert await friendships.get_friendship(alice.id, bob.id) is None
    assert await notifications.get_notifications_by_user(alice.id) == []
    assert await reactions.get_reactions_for_message(message.id) == []


async def test_deleted_group_takes_messages_and_reactions(make_user, users, groups, store):
    owner = await make_user()
    group = await groups.create_group("G", owner.id)
    messages = MessageService(store)
    message = await messages.create_message(
        owner.id, "group hello", group_id=group.id, is_group=True,
    )

    await users.delete_user(owner.id)
    assert await messages.get_message_by_id(message.id) is None
    assert await messages.get_messages_for_group(group.id) == []


async def test_update_owner_requires_membership(make_user, groups):
    owner, outsider = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)

    with pytest.raises(InvalidArgumentError) as exc:
        await groups.update_group_owner(group.id, outsider.id)
    assert exc.value.field == "new_owner_id"
    assert (await groups.get_group_by_id(group.id)).owner_id == owner.id


async def test_update_owner_to_member(make_user, groups, members):
    owner, member = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    await members.add_member_to_group(group.id, member.id, "member")

    updated = await groups.update_group_owner(group.id, member.id)
    assert updated.owner_id == member.id


async def test_update_owner_missing_group(make_user, groups):
    user = await make_user()
    with pytest.raises(ResourceNotFoundError):
        await groups.update_group_owner(uuid4(), user.id)


class VanishingMembers:
    """Transaction wrapper: records lock flags and hides chosen memberships,
    as if another request removed them after the cascade read the group."""

    def __init__(self, tx, vanished):
        self._tx = tx
        self.vanished = set(vanished)
        self.locked_queries = []
        self.locked_finds = []

    def __getattr__(self, name):
        return getattr(self._tx, name)

    async def query(self, model, *criteria, order_by=None, lock=False):
        if lock:
            self.locked_queries.append(model)
        return await self._tx.query(model, *criteria, order_by=order_by, lock=lock)

    async def find(self, model, key, lock=False):
        if lock:
            self.locked_finds.append((model, key))
        if model is GroupMember and key in self.vanished:
            return None
        return await self._tx.find(model, key, lock=lock)


async def test_cascade_locks_groups_and_members(make_user, groups, members, store):
    owner, member = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    await members.add_member_to_group(group.id, member.id)

    async with store.transaction(write=True) as tx:
        recorder = VanishingMembers(tx, vanished=())
        await cascade_user_deletion(recorder, owner.id)

    assert Group in recorder.locked_queries
    assert GroupMember in recorder.locked_queries
    assert (GroupMember, (group.id, member.id)) in recorder.locked_finds
    assert (await groups.get_group_by_id(group.id)).owner_id == member.id


async def test_vanished_successor_falls_back_to_next_member(
    make_user, users, groups, store,
):
    owner, early, late = await make_user(), await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    base = datetime.now(timezone.utc) + timedelta(days=1)
    await _join(store, group.id, early.id, base + timedelta(hours=1))
    await _join(store, group.id, late.id, base + timedelta(hours=2))

    async with store.transaction(write=True) as tx:
        report = await cascade_user_deletion(
            VanishingMembers(tx, vanished={(group.id, early.id)}), owner.id,
        )

    assert report.groups_reassigned == {group.id: late.id}
    assert (await groups.get_group_by_id(group.id)).owner_id == late.id


async def test_vanished_only_successor_deletes_group(
    make_user, groups, members, store,
):
    owner, member = await make_user(), await make_user()
    group = await groups.create_group("G", owner.id)
    await members.add_member_to_group(group.id, member.id)

    async with store.transaction(write=True) as tx:
        report = await cascade_user_deletion(
            VanishingMembers(tx, vanished={(group.id, member.id)}), owner.id,
        )

    assert report.groups_deleted == [group.id]
    assert await groups.get_group_by_id(group.id) is None


async def test_failed_cascade_rolls_back_everything(
    make_user, users, groups, members, store, monkeypatch,
):
    """A failure midway leaves the user, the group and the message untouched."""
    alice, bob = await make_user(), await make_user()
    group = await groups.create_group("G", alice.id)
    await members.add_member_to_group(group.id, bob.id)
    messages = MessageService(store)
    sent = await messages.create_message(alice.id, "hi", recipient_id=bob.id)

    async def fail(tx, user_id, report):
        raise RuntimeError("cascade interrupted")

    monkeypatch.setattr(membership_consistency, "_resolve_owned_groups", fail)

    with pytest.raises(RuntimeError):
        await users.delete_user(alice.id)

    assert await users.get_user_by_id(alice.id) is not None
    assert (await groups.get_group_by_id(group.id)).owner_id == alice.id
    sent = await messages.get_message_by_id(sent.id)
    assert sent.sender_id == alice.id
    assert sent.deleted_sender is None
