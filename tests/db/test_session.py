"""Tests for database session management and startup initialization."""

import contextlib

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from hygieneresto.core.config import Settings
from hygieneresto.core.security import verify_password
from hygieneresto.db.init_db import init_db
from hygieneresto.db.session import DatabaseSessionManager
from hygieneresto.models import User, UserRole
from tests.helpers import SUPERUSER_EMAIL, SUPERUSER_PASSWORD


@pytest.mark.asyncio
async def test_session_manager_initialization(db_settings: Settings) -> None:
    manager = DatabaseSessionManager()
    manager.init(db_settings)

    assert manager.engine is not None
    await manager.close()


@pytest.mark.asyncio
async def test_session_manager_not_initialized_raises_error() -> None:
    """Test that accessing session on uninitialized manager raises RuntimeError."""
    manager = DatabaseSessionManager()

    with pytest.raises(RuntimeError, match="not initialized"):
        async with manager.session():
            pass


def test_engine_not_initialized_raises_error() -> None:
    manager = DatabaseSessionManager()

    with pytest.raises(RuntimeError, match="not initialized"):
        _ = manager.engine


@pytest.mark.asyncio
async def test_session_manager_close(db_settings: Settings) -> None:
    manager = DatabaseSessionManager()
    manager.init(db_settings)

    await manager.close()
    assert manager._engine is None
    assert manager._sessionmaker is None


@pytest.mark.asyncio
async def test_sqlite_foreign_keys_enabled(db_settings: Settings) -> None:
    manager = DatabaseSessionManager()
    manager.init(db_settings)

    async with manager.session() as session:
        result = await session.execute(text("PRAGMA foreign_keys"))
        assert result.scalar_one() == 1
    await manager.close()


async def _raise_after_insert(manager: DatabaseSessionManager) -> None:
    async with manager.session() as session:
        session.add(
            User(
                email="ghost@bistrot.fr",
                password_hash="x",
                role=UserRole.super_admin,
                nom_entreprise="Ghost",
                nom_client="Ghost",
                prenom_client="Casper",
            )
        )
        await session.flush()
        raise ValueError("Test error")


@pytest.mark.asyncio
async def test_session_rollback_on_error(db_settings: Settings) -> None:
    manager = DatabaseSessionManager()
    manager.init(db_settings)
    await init_db(manager, db_settings)

    with pytest.raises(ValueError):
        await _raise_after_insert(manager)

    async with manager.session() as session:
        count = await session.scalar(
            select(func.count()).select_from(User).where(User.email == "ghost@bistrot.fr")
        )
        assert count == 0
    await manager.close()


@pytest.mark.asyncio
async def test_init_db_seeds_first_superuser_once(db_settings: Settings) -> None:
    manager = DatabaseSessionManager()
    manager.init(db_settings)

    await init_db(manager, db_settings)
    await init_db(manager, db_settings)

    async with manager.session() as session:
        users = (await session.execute(select(User))).scalars().all()
    await manager.close()

    assert [user.email for user in users] == [SUPERUSER_EMAIL]
    assert users[0].role is UserRole.super_admin
    assert verify_password(SUPERUSER_PASSWORD, users[0].password_hash)


@pytest.mark.asyncio
async def test_get_session_dependency(db_settings: Settings) -> None:
    """Test the FastAPI session dependency."""
    from hygieneresto.db import session as db_session_module

    db_session_module.sessionmanager.init(db_settings)
    session_gen = db_session_module.get_session()
    session = await anext(session_gen)

    assert isinstance(session, AsyncSession)
    result = await session.execute(text("SELECT 1"))
    assert result.scalar_one() == 1

    # Clean up
    with contextlib.suppress(StopAsyncIteration):
        await anext(session_gen)
    await db_session_module.sessionmanager.close()
