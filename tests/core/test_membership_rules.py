"""Membership Rules — successor choice and ownership cascade planning.

Tests:
    - Successor is the earliest-joined remaining member, never the departing user
    - Ties on joined_at break by user id
    - Groups without remaining members are planned for deletion
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from unrecorded.core.membership_rules import (
    OwnershipOutcome, choose_successor, plan_ownership_cascade,
)

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@dataclass
class _Member:
    group_id: UUID
    user_id: UUID
    joined_at: datetime
    role: str = "member"


def test_no_other_members_means_no_successor():
    g, owner = uuid4(), uuid4()
    assert choose_successor([_Member(g, owner, T0)], owner) is None


def test_earliest_joined_member_succeeds():
    g, owner, early, late = uuid4(), uuid4(), uuid4(), uuid4()
    members = [
        _Member(g, owner, T0),
        _Member(g, late, T0 + timedelta(days=2)),
        _Member(g, early, T0 + timedelta(days=1)),
    ]
    assert choose_successor(members, owner) == early


def test_departing_user_never_chosen_even_if_senior():
    g, owner, other = uuid4(), uuid4(), uuid4()
    members = [_Member(g, owner, T0 - timedelta(days=5)), _Member(g, other, T0)]
    assert choose_successor(members, owner) == other


def test_tie_broken_by_user_id():
    g, owner = uuid4(), uuid4()
    a = UUID("00000000-0000-0000-0000-000000000001")
    b = UUID("00000000-0000-0000-0000-000000000002")
    members = [_Member(g, b, T0), _Member(g, a, T0)]
    assert choose_successor(members, owner) == a


def test_naive_and_aware_joined_at_compare():
    g, owner, naive, aware = uuid4(), uuid4(), uuid4(), uuid4()
    members = [
        _Member(g, aware, T0 + timedelta(hours=1)),
        _Member(g, naive, T0.replace(tzinfo=None)),
    ]
    assert choose_successor(members, owner) == naive


def test_plan_covers_every_owned_group_in_order():
    owner, member = uuid4(), uuid4()
    kept, dropped = uuid4(), uuid4()
    plan = plan_ownership_cascade(
        [kept, dropped],
        {
            kept: [_Member(kept, owner, T0), _Member(kept, member, T0)],
            dropped: [_Member(dropped, owner, T0)],
        },
        owner,
    )
    assert plan == [
        OwnershipOutcome(kept, member),
        OwnershipOutcome(dropped, None),
    ]
    assert not plan[0].deletes_group
    assert plan[1].deletes_group


def test_group_missing_from_member_map_is_deleted():
    owner, g = uuid4(), uuid4()
    assert plan_ownership_cascade([g], {}, owner)[0].deletes_group
