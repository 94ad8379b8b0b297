"""Service Dependencies — FastAPI providers that bind services to the store.

Invariants:
    - Every service is built per request from get_store(); tests override
      get_store only
"""

from fastapi import Depends

from unrecorded.config import get_settings
from unrecorded.core.store_protocols import Store
from unrecorded.infrastructure.database import get_store
from unrecorded.services.friendship_service import FriendshipService
from unrecorded.services.group_service import GroupService
from unrecorded.services.membership_service import MembershipService
from unrecorded.services.message_service import MessageService
from unrecorded.services.notification_service import NotificationService
from unrecorded.services.reaction_service import ReactionService
from unrecorded.services.session_service import SessionService
from unrecorded.services.user_service import UserService


def get_user_service(store: Store = Depends(get_store)) -> UserService:
    return UserService(store)


def get_session_service(store: Store = Depends(get_store)) -> SessionService:
    settings = get_settings()
    return SessionService(
        store,
        ttl_minutes=settings.session_ttl_minutes,
        token_bytes=settings.session_token_bytes,
    )


def get_group_service(store: Store = Depends(get_store)) -> GroupService:
    return GroupService(store)


def get_membership_service(store: Store = Depends(get_store)) -> MembershipService:
    return MembershipService(store)


def get_message_service(store: Store = Depends(get_store)) -> MessageService:
    return MessageService(store)


def get_friendship_service(store: Store = Depends(get_store)) -> FriendshipService:
    return FriendshipService(store)


def get_reaction_service(store: Store = Depends(get_store)) -> ReactionService:
    return ReactionService(store)


def get_notification_service(
    store: Store = Depends(get_store),
) -> NotificationService:
    return NotificationService(store)
