"""Database Session Manager — pooled async sessions for routes and concurrent profile queries.

Invariants:
    - A session scope rolls back on any SQLAlchemy failure and re-raises it as DatabaseError
    - Every scope closes its session on exit, returning the connection to the pool
    - Pool ceiling = pool_size + max_overflow (default 100 + 0); callers queue beyond it
    - Driver messages go to the log, never into the DatabaseError message

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: rows stay readable after a service commits
    - Two dependencies: get_db yields one request-scoped session, get_session_scope
      hands out the scope factory itself for code that needs several sessions at
      once (an AsyncSession cannot run statements concurrently)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncGenerator, Callable

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from directory_api.core.errors import DatabaseError

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_FAILURE_KINDS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def classify_failure(exc: SQLAlchemyError) -> tuple[str, str]:
    """(public message, operation) for a SQLAlchemy exception."""
    for kind, message, operation in _FAILURE_KINDS:
        if isinstance(exc, kind):
            return message, operation
    return "Database operation failed", "unknown"


class DatabaseSessionManager:
    """Owns the engine and pool; hands out self-cleaning session scopes."""

    def __init__(
        self, database_url: str, pool_size: int = 100, max_overflow: int = 0,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
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
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = classify_failure(e)
            logger.error(f"DB {operation} failed ({type(e).__name__}): {e}")
            raise DatabaseError(message, operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through the pool; False instead of raising."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def _require_manager() -> DatabaseSessionManager:
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session for the whole request."""
    async with _require_manager().session() as session:
        yield session


def get_session_scope() -> SessionScope:
    """FastAPI dependency: a factory of independent session scopes."""
    return _require_manager().session
