"""Membership Consistency — user-deletion cascade, ownership transfer, group removal.

Invariants:
    - Every function here runs inside a caller-provided StoreTransaction and
      never opens or commits one itself: the caller's transaction makes the
      whole cascade all-or-nothing
    - After cascade_user_deletion, every group the user owned either no longer
      exists or is owned by one of its remaining members
    - Messages referencing the user are kept; sender_id/recipient_id are
      cleared and deleted_sender/deleted_recipient record who was removed
    - transfer_group_ownership locks the group and the prospective owner's
      membership before writing, so the membership cannot vanish in between
    - The cascade locks each owned group with its memberships before planning,
      then locks the successor's membership again before writing; if it is
      gone the next candidate is used, or the group is deleted
    - Plain membership removal never reassigns ownership (see membership_service)

Design Decisions:
    - Replaces the database trigger cascade with explicit store calls: same
      behavior on PostgreSQL and SQLite, and testable without triggers
    - Successor choice delegated to core/membership_rules.py
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import or_, select

from unrecorded.core.errors import (
    ErrorContext, InvalidArgumentError, ResourceNotFoundError,
)
from unrecorded.core.membership_rules import (
    choose_successor, plan_ownership_cascade,
)
from unrecorded.core.store_protocols import StoreTransaction
from unrecorded.models.friendship import Friendship
from unrecorded.models.group import Group
from unrecorded.models.group_member import GroupMember
from unrecorded.models.message import Message
from unrecorded.models.notification import Notification
from unrecorded.models.reaction import Reaction
from unrecorded.models.session import Session as SessionModel
from unrecorded.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class UserDeletionReport:
    """What the cascade changed, for logging and the API response."""
    user_id: UUID
    sent_messages_marked: int = 0
    received_messages_marked: int = 0
    groups_reassigned: dict[UUID, UUID] = field(default_factory=dict)
    groups_deleted: list[UUID] = field(default_factory=list)
    sessions_removed: int = 0
    memberships_removed: int = 0


async def remove_group(tx: StoreTransaction, group: Group) -> None:
    """Delete a group with its memberships, messages and their reactions."""
    group_messages = select(Message.id).where(Message.group_id == group.id)
    await tx.remove_where(Reaction, Reaction.message_id.in_(group_messages))
    await tx.remove_where(Message, Message.group_id == group.id)
    await tx.remove_where(GroupMember, GroupMember.group_id == group.id)
    await tx.remove(group)


async def transfer_group_ownership(
    tx: StoreTransaction, group_id: UUID, new_owner_id: UUID,
) -> Group:
    group = await tx.find(Group, group_id, lock=True)
    if group is None:
        raise ResourceNotFoundError(
            "Group", str(group_id), ErrorContext(group_id=str(group_id)),
        )
    membership = await tx.find(GroupMember, (group_id, new_owner_id), lock=True)
    if membership is None:
        raise InvalidArgumentError(
            "The new owner must be a member of the group.",
            "new_owner_id",
            ErrorContext(group_id=str(group_id), user_id=str(new_owner_id)),
        )
    group.owner_id = new_owner_id
    return await tx.merge(group)


async def _mark_messages(tx: StoreTransaction, user_id: UUID) -> tuple[int, int]:
    sent = await tx.query(Message, Message.sender_id == user_id)
    for message in sent:
        message.deleted_sender = user_id
        message.sender_id = None
        await tx.merge(message)

    received = await tx.query(Message, Message.recipient_id == user_id)
    for message in received:
        message.deleted_recipient = user_id
        message.recipient_id = None
        await tx.merge(message)
    return len(sent), len(received)


async def _confirm_successor(
    tx: StoreTransaction, group_id: UUID, members: list[GroupMember],
    user_id: UUID, candidate: UUID | None,
) -> UUID | None:
    """Lock the candidate's membership; fall back to the next one if it is gone."""
    remaining = list(members)
    while candidate is not None:
        if await tx.find(GroupMember, (group_id, candidate), lock=True) is not None:
            return candidate
        remaining = [m for m in remaining if m.user_id != candidate]
        candidate = choose_successor(remaining, user_id)
    return None


async def _resolve_owned_groups(
    tx: StoreTransaction, user_id: UUID, report: UserDeletionReport,
) -> None:
    owned = await tx.query(
        Group, Group.owner_id == user_id, order_by=Group.created_at, lock=True,
    )
    if not owned:
        return

    members_by_group = {
        group.id: await tx.query(
            GroupMember, GroupMember.group_id == group.id, lock=True,
        )
        for group in owned
    }
    plan = plan_ownership_cascade(
        [group.id for group in owned], members_by_group, user_id,
    )
    groups = {group.id: group for group in owned}

    for outcome in plan:
        group = groups[outcome.group_id]
        new_owner_id = await _confirm_successor(
            tx, group.id, members_by_group[group.id], user_id,
            outcome.new_owner_id,
        )
        if new_owner_id is None:
            await remove_group(tx, group)
            report.groups_deleted.append(group.id)
        else:
            group.owner_id = new_owner_id
            await tx.merge(group)
            report.groups_reassigned[group.id] = new_owner_id


async def cascade_user_deletion(
    tx: StoreTransaction, user_id: UUID,
) -> UserDeletionReport | None:
    """Delete a user and every row that depends on it. None if no such user."""
    user = await tx.find(User, user_id, lock=True)
    if user is None:
        return None

    report = UserDeletionReport(user_id=user_id)
    (
        report.sent_messages_marked,
        report.received_messages_marked,
    ) = await _mark_messages(tx, user_id)

    await _resolve_owned_groups(tx, user_id, report)

    await tx.remove_where(Reaction, Reaction.user_id == user_id)
    report.memberships_removed = await tx.remove_where(
        GroupMember, GroupMember.user_id == user_id,
    )
    report.sessions_removed = await tx.remove_where(
        SessionModel, SessionModel.user_id == user_id,
    )
    await tx.remove_where(
        Friendship,
        or_(Friendship.user_id_1 == user_id, Friendship.user_id_2 == user_id),
    )
    await tx.remove_where(Notification, Notification.user_id == user_id)
    await tx.remove(user)

    logger.info(
        f"User cascade: {report.sent_messages_marked} sent / "
        f"{report.received_messages_marked} received messages marked, "
        f"{len(report.groups_reassigned)} groups reassigned, "
        f"{len(report.groups_deleted)} groups deleted",
        extra={"user_id": user_id, "operation": "delete_user"},
    )
    return report
