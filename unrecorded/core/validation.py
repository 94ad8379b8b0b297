"""Field Validation — pure predicates run before every mutating operation.

Invariants:
    - Every check either returns None or raises InvalidArgumentError(reason, field)
    - No check performs IO, logs, or mutates its input
    - Blank means empty or whitespace-only

Design Decisions:
    - Module of plain functions, no shared state: safe from any thread or task
    - Checks take already-typed values; parsing (UUIDs, datetimes) happens at the API boundary
"""

from uuid import UUID

from unrecorded.core.domain_types import (
    EMAIL_MAX_LENGTH,
    EMOJI_MAX_LENGTH,
    GROUP_NAME_MAX_LENGTH,
    GROUP_ROLE_MAX_LENGTH,
    NOTIFICATION_TYPE_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    FriendshipStatus,
)
from unrecorded.core.errors import InvalidArgumentError


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_text(value: str | None, field: str, max_length: int, label: str) -> None:
    if _is_blank(value) or len(value) > max_length:
        raise InvalidArgumentError(
            f"Invalid {label}. It must not be blank and must be "
            f"{max_length} characters or less.",
            field,
        )


# ─── Users ───────────────────────────────────────────────────────

def check_username(username: str | None) -> None:
    _check_text(username, "username", USERNAME_MAX_LENGTH, "username")


def check_email(email: str | None) -> None:
    if (
        _is_blank(email)
        or len(email) > EMAIL_MAX_LENGTH
        or "@" not in email
        or "." not in email
    ):
        raise InvalidArgumentError("Invalid email address.", "email")


def check_password(password: str | None) -> None:
    """Only blankness is checked; strength comes from the hashing cost."""
    if _is_blank(password):
        raise InvalidArgumentError("Password must not be blank.", "password")


# ─── Friendships ─────────────────────────────────────────────────

def check_friendship_status(status: str | None) -> FriendshipStatus:
    """Return the parsed status so callers store the enum, not the raw string."""
    if _is_blank(status):
        raise InvalidArgumentError("Friendship status must not be blank.", "status")
    try:
        return FriendshipStatus(status)
    except ValueError:
        raise InvalidArgumentError(
            f"Invalid friendship status: {status}", "status",
        ) from None


def check_user_link(user_id_1: UUID, user_id_2: UUID | None) -> None:
    if user_id_1 == user_id_2:
        raise InvalidArgumentError(
            "Links cannot point to the same user.", "user_id_2",
        )


# ─── Groups ──────────────────────────────────────────────────────

def check_group_name(name: str | None) -> None:
    _check_text(name, "name", GROUP_NAME_MAX_LENGTH, "group name")


def check_group_role(role: str | None) -> None:
    _check_text(role, "role", GROUP_ROLE_MAX_LENGTH, "group role")


# ─── Messages, reactions, notifications ──────────────────────────

def check_message_target(
    recipient_id: UUID | None, group_id: UUID | None, is_group: bool,
) -> None:
    """Exactly one of recipient_id / group_id, consistent with is_group."""
    if is_group:
        if group_id is None:
            raise InvalidArgumentError(
                "Group messages must include a group ID.", "group_id",
            )
        if recipient_id is not None:
            raise InvalidArgumentError(
                "Group messages must not have a recipient.", "recipient_id",
            )
    else:
        if recipient_id is None:
            raise InvalidArgumentError(
                "Direct messages must have a recipient.", "recipient_id",
            )
        if group_id is not None:
            raise InvalidArgumentError(
                "Direct messages must not include a group ID.", "group_id",
            )


def check_message_content(content_encrypted: str | None) -> None:
    if content_encrypted is None or content_encrypted == "":
        raise InvalidArgumentError(
            "Message content must not be empty.", "content_encrypted",
        )


def check_emoji(emoji: str | None) -> None:
    _check_text(emoji, "emoji", EMOJI_MAX_LENGTH, "emoji")


def check_notification_type(notification_type: str | None) -> None:
    _check_text(
        notification_type, "type", NOTIFICATION_TYPE_MAX_LENGTH,
        "notification type",
    )
