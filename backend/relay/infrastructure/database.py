"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - SQLAlchemy exceptions escaping a session are mapped to DatabaseError;
      RelayError raised inside the session block passes through untouched

Design Decisions:
    - Module-level db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - SQLite URLs skip pool sizing (aiosqlite uses its own pool class)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncGenerator, Callable

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from relay.core.errors import DatabaseError

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]


# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_TABLE: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def _classify(error: SQLAlchemyError) -> tuple[str, str]:
    for error_type, message, operation in _ERROR_TABLE:
        if isinstance(error, error_type):
            return message, operation
    return "Database operation failed", "unknown"


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        pool_kwargs = {}
        if not database_url.startswith("sqlite"):
            pool_kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_recycle": 3600,
            }
        self.engine = create_async_engine(
            database_url, pool_pre_ping=True, **pool_kwargs,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that rolls back and maps SQLAlchemy failures to DatabaseError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _classify(e)
            logger.error(f"{message} ({type(e).__name__}): {e}")
            raise DatabaseError(message, operation)
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through a pooled connection (readiness probe)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Initialized on startup by the FastAPI lifespan
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_session_scope() -> SessionScope:
    """FastAPI dependency: a factory of per-operation database sessions.

    Calls in one batch run concurrently and an AsyncSession is not safe for
    concurrent use, so repositories open one session per operation.
    """
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager.session
