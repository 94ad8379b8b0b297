"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All closed value sets encoded as Enums — no raw string matching
    - Field limits live here so validation, models and migrations agree

Design Decisions:
    - str Enums: serialize to JSON and to the DB column without custom encoders
"""

from enum import Enum


# ─── Field Limits ────────────────────────────────────────────────

USERNAME_MAX_LENGTH = 30
EMAIL_MAX_LENGTH = 254
GROUP_NAME_MAX_LENGTH = 50
GROUP_ROLE_MAX_LENGTH = 50
EMOJI_MAX_LENGTH = 4
NOTIFICATION_TYPE_MAX_LENGTH = 15

OWNER_ROLE = "owner"
MEMBER_ROLE = "member"


# ─── Enums ───────────────────────────────────────────────────────

class FriendshipStatus(str, Enum):
    """Friendship states — maps to the 3-char `status` column."""
    FRIENDS = "FRD"
    PENDING = "PND"
    UNKNOWN = "UNK"


class SessionState(str, Enum):
    """Observable states of a stored session; a deleted session has no row."""
    ACTIVE = "active"
    EXPIRED = "expired"
