"""Async engine and per-request sessions.

PostgreSQL (psycopg) in production, SQLite (aiosqlite) in development and
tests. ``sessionmanager`` is initialized by the application lifespan; routes
receive a session through ``get_db``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from loguru import logger
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from hygieneresto.core.config import Settings

NOT_INITIALIZED = "DatabaseSessionManager is not initialized"


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _engine_options(url: str, settings: "Settings") -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.DB_ECHO}
    if url.startswith("sqlite"):
        # aiosqlite has no connection pool to size
        return options
    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    return options


class DatabaseSessionManager:
    """Owns the engine; each ``session()`` block is one unit of work.

    The block commits when it exits cleanly and rolls back when it raises.
    """

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def init(self, settings: "Settings") -> None:
        url = settings.sqlalchemy_database_uri
        self._engine = create_async_engine(url, **_engine_options(url, settings))
        if url.startswith("sqlite"):
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )
        logger.debug(f"Database engine ready ({self._engine.url.get_backend_name()})")

    async def close(self) -> None:
        """Dispose of the pool. Safe to call twice."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError(NOT_INITIALIZED)
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError(NOT_INITIALIZED)

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logger.error(f"Rolling back: {type(e).__name__}: {e}")
                await session.rollback()
                raise


sessionmanager = DatabaseSessionManager()


async def get_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency: one session per request."""
    async with sessionmanager.session() as session:
        yield session


get_db = get_session
