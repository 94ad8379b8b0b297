"""Messages, Friendships, Reactions, Notifications — service behavior."""

from uuid import uuid4

import pytest

from unrecorded.core.errors import (
    ConflictError, InvalidArgumentError, ResourceNotFoundError,
)
from unrecorded.models.friendship import Friendship
from unrecorded.models.user import User
from unrecorded.services.friendship_service import FriendshipService, friendship_key
from unrecorded.services.group_service import GroupService
from unrecorded.services.message_service import MessageService
from unrecorded.services.notification_service import NotificationService
from unrecorded.services.reaction_service import ReactionService


@pytest.fixture
def messages(store):
    return MessageService(store)


@pytest.fixture
def friendships(store):
    return FriendshipService(store)


@pytest.fixture
def notifications(store):
    return NotificationService(store)


# ─── Messages ────────────────────────────────────────────────────

async def test_conversation_both_directions(make_user, messages):
    alice, bob, carol = await make_user(), await make_user(), await make_user()
    m1 = await messages.create_message(alice.id, "a->b", recipient_id=bob.id)
    m2 = await messages.create_message(bob.id, "b->a", recipient_id=alice.id)
    await messages.create_message(alice.id, "a->c", recipient_id=carol.id)

    found = await messages.get_messages_between_users(alice.id, bob.id)
    assert {m.id for m in found} == {m1.id, m2.id}


async def test_message_with_both_targets_rejected(make_user, messages, store):
    alice, bob = await make_user(), await make_user()
    group = await GroupService(store).create_group("G", alice.id)
    with pytest.raises(InvalidArgumentError):
        await messages.create_message(
            alice.id, "x", recipient_id=bob.id, group_id=group.id,
        )


async def test_message_to_self_rejected(make_user, messages):
    alice = await make_user()
    with pytest.raises(InvalidArgumentError):
        await messages.create_message(alice.id, "x", recipient_id=alice.id)


async def test_message_to_unknown_recipient(make_user, messages):
    alice = await make_user()
    with pytest.raises(ResourceNotFoundError):
        await messages.create_message(alice.id, "x", recipient_id=uuid4())


async def test_soft_delete_and_edit(make_user, messages):
    alice, bob = await make_user(), await make_user()
    message = await messages.create_message(alice.id, "v1", recipient_id=bob.id)
    assert (await messages.update_message_content(message.id, "v2")).content_encrypted == "v2"
    assert (await messages.mark_message_deleted(message.id)).is_deleted is True
    assert await messages.get_message_by_id(message.id) is not None


async def test_hard_delete_missing_message_not_found(messages):
    with pytest.raises(ResourceNotFoundError):
        await messages.delete_message(uuid4())


async def test_hard_delete_removes_reactions(make_user, messages, store):
    alice, bob = await make_user(), await make_user()
    reactions = ReactionService(store)
    message = await messages.create_message(alice.id, "x", recipient_id=bob.id)
    await reactions.create_reaction(bob.id, message.id, "🔥")

    await messages.delete_message(message.id)
    assert await messages.get_message_by_id(message.id) is None
    assert await reactions.get_reactions_for_message(message.id) == []


# ─── Friendships ─────────────────────────────────────────────────

async def test_self_friendship_rejected(make_user, friendships):
    alice = await make_user()
    with pytest.raises(InvalidArgumentError):
        await friendships.create_friendship(alice.id, alice.id, "PND")


async def test_friendship_is_symmetric(make_user, friendships):
    alice, bob = await make_user(), await make_user()
    await friendships.create_friendship(alice.id, bob.id, "PND")
    assert await friendships.get_friendship(bob.id, alice.id) is not None
    with pytest.raises(ConflictError):
        await friendships.create_friendship(bob.id, alice.id, "PND")


async def test_friendship_stored_smaller_id_first(make_user, friendships):
    alice, bob = await make_user(), await make_user()
    low, high = sorted([alice.id, bob.id])

    created = await friendships.create_friendship(high, low, "PND")
    assert (created.user_id_1, created.user_id_2) == (low, high)
    assert await friendships.get_friendship(low, high) is not None
    assert await friendships.get_friendship(high, low) is not None


async def test_second_row_for_pair_rejected_by_table(make_user, friendships, store):
    """A racing create in either order cannot add a second row for the pair."""
    alice, bob = await make_user(), await make_user()
    await friendships.create_friendship(alice.id, bob.id, "PND")
    low, high = friendship_key(bob.id, alice.id)

    for first, second in ((low, high), (high, low)):
        with pytest.raises(ConflictError):
            async with store.transaction(write=True) as tx:
                await tx.persist(Friendship(
                    user_id_1=first, user_id_2=second, status="PND",
                ))
    assert len(await friendships.get_friendships_for_user(alice.id)) == 1


async def test_friendship_status_update_and_delete(make_user, friendships):
    alice, bob = await make_user(), await make_user()
    await friendships.create_friendship(alice.id, bob.id, "PND")
    updated = await friendships.update_friendship_status(bob.id, alice.id, "FRD")
    assert updated.status == "FRD"
    assert len(await friendships.get_friendships_for_user(bob.id)) == 1

    await friendships.delete_friendship(alice.id, bob.id)
    with pytest.raises(ResourceNotFoundError):
        await friendships.delete_friendship(alice.id, bob.id)


async def test_invalid_friendship_status(make_user, friendships):
    alice, bob = await make_user(), await make_user()
    with pytest.raises(InvalidArgumentError):
        await friendships.create_friendship(alice.id, bob.id, "BFF")


# ─── Reactions ───────────────────────────────────────────────────

async def test_reaction_lifecycle(make_user, messages, store):
    alice, bob = await make_user(), await make_user()
    reactions = ReactionService(store)
    message = await messages.create_message(alice.id, "x", recipient_id=bob.id)

    await reactions.create_reaction(bob.id, message.id, "👍")
    with pytest.raises(ConflictError):
        await reactions.create_reaction(bob.id, message.id, "👍")
    assert await reactions.get_reaction(bob.id, message.id, "👍") is not None

    assert await reactions.delete_reaction(bob.id, message.id, "👍") is True
    assert await reactions.delete_reaction(bob.id, message.id, "👍") is False


# ─── Notifications ───────────────────────────────────────────────

async def test_unread_and_read_status(make_user, notifications):
    alice = await make_user()
    first = await notifications.create_notification(alice.id, "message", "one")
    await notifications.create_notification(alice.id, "message", "two")

    await notifications.update_notification_read_status(first.id, True)
    unread = await notifications.get_unread_notifications_by_user(alice.id)
    assert [n.content for n in unread] == ["two"]
    assert len(await notifications.get_notifications_by_user(alice.id)) == 2


async def test_housekeeping_removes_read(make_user, notifications):
    alice = await make_user()
    read = await notifications.create_notification(alice.id, "message", "old")
    fresh = await notifications.create_notification(alice.id, "message", "new")
    await notifications.update_notification_read_status(read.id, True)

    assert await notifications.notification_housekeeping() == 1
    assert await notifications.get_notification_by_id(read.id) is None
    assert await notifications.get_notification_by_id(fresh.id) is not None


async def test_housekeeping_removes_orphaned(make_user, notifications, store):
    """A notification whose user row is gone is removed even if unread."""
    alice, bob = await make_user(), await make_user()
    orphan = await notifications.create_notification(alice.id, "message", "lost")
    kept = await notifications.create_notification(bob.id, "message", "kept")
    async with store.transaction(write=True) as tx:
        await tx.remove_where(User, User.id == alice.id)

    assert await notifications.notification_housekeeping() == 1
    assert await notifications.get_notification_by_id(orphan.id) is None
    assert await notifications.get_notification_by_id(kept.id) is not None


async def test_delete_notifications(make_user, notifications):
    alice = await make_user()
    n = await notifications.create_notification(alice.id, "message", "x")
    await notifications.create_notification(alice.id, "message", "y")
    assert await notifications.delete_notification(n.id) is True
    assert await notifications.delete_notification(n.id) is False
    assert await notifications.delete_notifications_by_user(alice.id) == 1


async def test_notification_for_unknown_user(notifications):
    with pytest.raises(ResourceNotFoundError):
        await notifications.create_notification(uuid4(), "message", "x")
