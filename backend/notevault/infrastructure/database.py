"""Note Account Database — async engine and sessions behind SqlKeyedStorage.

Invariants:
    - A session that raises is rolled back before the error leaves it
    - IntegrityError on note_accounts can only mean two writers raced for one
      address, so it surfaces as ConcurrencyError (409, safe to re-run)
    - Other SQLAlchemy failures surface as DatabaseError (503)
    - NoteVaultError raised inside a session passes through untouched
    - SQLite URLs get no pool sizing: aiosqlite uses its own pool classes

Design Decisions:
    - db_manager is created by the FastAPI lifespan, never at import time
    - expire_on_commit=False: records are re-read through KeyedStorage, and
      lazy loads after commit are not possible in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from notevault.core.errors import ConcurrencyError, DatabaseError, NoteVaultError

logger = logging.getLogger(__name__)

# Checked in order: IntegrityError and OperationalError are DBAPIErrors too
_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def engine_options(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> dict[str, Any]:
    """Keyword arguments for create_async_engine, by backend."""
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


def translate_error(error: SQLAlchemyError) -> NoteVaultError:
    """Map a SQLAlchemy failure to the NoteVault error the API reports."""
    if isinstance(error, IntegrityError):
        return ConcurrencyError("Note address was written concurrently")
    for kind, message, operation in _FAILURES:
        if isinstance(error, kind):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the engine for note_accounts and hands out rollback-safe sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            **engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session; roll back and translate on failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            translated = translate_error(e)
            logger.error(
                f"DB error: {e}", extra={"error_code": translated.code},
            )
            raise translated from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True if the database answers a trivial query (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.close()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
