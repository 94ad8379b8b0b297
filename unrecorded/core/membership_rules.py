"""Membership Rules — pure decisions behind the user-deletion ownership cascade.

Invariants:
    - A successor is always a current member of the group and never the departing user
    - A group with no remaining members is planned for deletion, never left ownerless
    - Planning is deterministic: same inputs, same plan

Design Decisions:
    - Successor policy: longest-standing remaining member (earliest joined_at),
      ties broken by user id; the original random pick is not preserved
    - The service gathers memberships inside the transaction and applies the
      plan; this module only decides
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from unrecorded.core.session_rules import as_utc
from unrecorded.core.store_protocols import MembershipLike


@dataclass(frozen=True)
class OwnershipOutcome:
    """What happens to one group owned by a departing user."""
    group_id: UUID
    new_owner_id: UUID | None

    @property
    def deletes_group(self) -> bool:
        return self.new_owner_id is None


def _seniority_key(member: MembershipLike) -> tuple[datetime, str]:
    return (as_utc(member.joined_at), str(member.user_id))


def choose_successor(
    members: list[MembershipLike], departing_user_id: UUID,
) -> UUID | None:
    """Pick the next owner among members other than the departing user."""
    remaining = [m for m in members if m.user_id != departing_user_id]
    if not remaining:
        return None
    return min(remaining, key=_seniority_key).user_id


def plan_ownership_cascade(
    owned_group_ids: list[UUID],
    members_by_group: dict[UUID, list[MembershipLike]],
    departing_user_id: UUID,
) -> list[OwnershipOutcome]:
    """One outcome per owned group, in the order given."""
    return [
        OwnershipOutcome(
            group_id=group_id,
            new_owner_id=choose_successor(
                members_by_group.get(group_id, []), departing_user_id,
            ),
        )
        for group_id in owned_group_ids
    ]
