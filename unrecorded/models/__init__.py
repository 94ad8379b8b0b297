"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root for sessions, memberships, friendships,
      reactions and notifications; removal of those rows is done by the
      application cascade, with ON DELETE rules as a backstop

Design Decisions:
    - One file per entity for locality
    - No ORM relationship() cascades: every cascade step is an explicit store
      call inside the service transaction
    - All models imported here so Base.metadata is complete before create_all
"""

from unrecorded.models.user import User  # noqa: F401
from unrecorded.models.session import Session  # noqa: F401
from unrecorded.models.group import Group  # noqa: F401
from unrecorded.models.group_member import GroupMember  # noqa: F401
from unrecorded.models.message import Message  # noqa: F401
from unrecorded.models.friendship import Friendship  # noqa: F401
from unrecorded.models.reaction import Reaction  # noqa: F401
from unrecorded.models.notification import Notification  # noqa: F401
