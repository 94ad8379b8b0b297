"""Boundary Protocols — contracts between core/services and the persistence shell.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - All persistence goes through Store.transaction() / Store.execute_transaction()
    - A write transaction commits when its block exits normally and rolls back
      on any exception; the connection is always released
    - persist/merge/remove take effect immediately inside the transaction, so
      later reads in the same transaction observe them and constraint
      violations surface at the call that caused them

Design Decisions:
    - Protocol over ABC: structural subtyping, the SQLAlchemy adapter does not inherit
    - Criteria are opaque to the protocol (SQLAlchemy column expressions in
      practice); the core never inspects them
"""

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any, Awaitable, Callable, Protocol, TypeVar
from uuid import UUID

T = TypeVar("T")


class SessionLike(Protocol):
    """Structural contract for authentication session rows."""
    id: UUID
    user_id: UUID
    token: str
    expires_at: datetime


class MembershipLike(Protocol):
    """Structural contract for group membership rows."""
    group_id: UUID
    user_id: UUID
    role: str
    joined_at: datetime


class StoreTransaction(Protocol):
    """Unit of work handed to the block of a Store transaction."""
    async def find(
        self, model: type[T], key: Any, lock: bool = False,
    ) -> T | None: ...
    async def query(
        self, model: type[T], *criteria: Any, order_by: Any = None,
        lock: bool = False,
    ) -> list[T]: ...
    async def persist(self, entity: T) -> T: ...
    async def merge(self, entity: T) -> T: ...
    async def remove(self, entity: object) -> None: ...
    async def remove_where(self, model: type, *criteria: Any) -> int: ...


class Store(Protocol):
    """Transactional persistence capability consumed by every service."""
    def transaction(
        self, write: bool = False,
    ) -> AbstractAsyncContextManager[StoreTransaction]: ...

    async def execute_transaction(
        self, write: bool, fn: Callable[[StoreTransaction], Awaitable[T]],
    ) -> T: ...
