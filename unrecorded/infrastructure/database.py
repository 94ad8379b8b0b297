"""Database Session Manager — async connection pool, transactional Store, error mapping.

Invariants:
    - Every transaction auto-rolls-back on exception (no partial commits leak)
    - Write transactions commit exactly once, when the block exits normally
    - Read transactions never commit; they are rolled back when the session closes
    - Connection pool is bounded (pool_size + max_overflow) and waits at most
      pool_timeout seconds; exhaustion raises ResourceExhaustedError
    - SQLAlchemy exceptions are mapped to core/errors.py; UnrecordedError
      raised by the block propagates unchanged after rollback

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: entities stay readable after the block returns
    - Every persist/merge/remove flushes, so statements hit the DB in call order
      and a constraint violation is raised by the call that caused it
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Awaitable, Callable, TypeVar

from sqlalchemy import delete, select, text
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)

from unrecorded.core.errors import (
    ConflictError, InternalError, ResourceExhaustedError,
)
from unrecorded.core.store_protocols import StoreTransaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlAlchemyTransaction:
    """StoreTransaction over one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find(
        self, model: type[T], key: Any, lock: bool = False,
    ) -> T | None:
        """Primary-key lookup; lock=True takes a row lock (SELECT ... FOR UPDATE)."""
        return await self._session.get(model, key, with_for_update=lock or None)

    async def query(
        self, model: type[T], *criteria: Any, order_by: Any = None,
        lock: bool = False,
    ) -> list[T]:
        """Filtered select; lock=True locks every returned row."""
        stmt = select(model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if lock:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def persist(self, entity: T) -> T:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def merge(self, entity: T) -> T:
        merged = await self._session.merge(entity)
        await self._session.flush()
        return merged

    async def remove(self, entity: object) -> None:
        await self._session.delete(entity)
        await self._session.flush()

    async def remove_where(self, model: type, *criteria: Any) -> int:
        """Set-based delete; concurrent callers never double-count a row."""
        result = await self._session.execute(
            delete(model).where(*criteria).execution_options(
                synchronize_session=False,
            ),
        )
        return result.rowcount or 0


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_timeout: float = 30.0,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback and error mapping."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f"DB integrity error: {e.orig}")
            raise ConflictError("Integrity constraint violated") from e
        except PoolTimeoutError as e:
            await session.rollback()
            logger.error(f"DB pool exhausted: {e}")
            raise ResourceExhaustedError("Connection pool exhausted") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise ResourceExhaustedError("Database connection unavailable") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise InternalError("Database operation failed", "query") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(
        self, write: bool = False,
    ) -> AsyncGenerator[StoreTransaction, None]:
        """Open a unit of work; commit on normal exit when write=True."""
        async with self.session() as session:
            tx = SqlAlchemyTransaction(session)
            yield tx
            if write:
                await session.commit()

    async def execute_transaction(
        self, write: bool, fn: Callable[[StoreTransaction], Awaitable[T]],
    ) -> T:
        async with self.transaction(write) as tx:
            return await fn(tx)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


def get_store() -> DatabaseSessionManager:
    """FastAPI dependency for the transactional store."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
