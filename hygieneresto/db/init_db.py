"""Schema creation and first super admin bootstrap."""

from loguru import logger
from sqlalchemy import select

from hygieneresto.core.config import Settings
from hygieneresto.core.security import hash_password
from hygieneresto.db.session import DatabaseSessionManager
from hygieneresto.models import Base, User, UserRole


async def create_tables(manager: DatabaseSessionManager) -> None:
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_first_superuser(
    manager: DatabaseSessionManager, settings: Settings
) -> User | None:
    """Create the configured super admin unless an account already uses its email."""
    if not settings.FIRST_SUPERUSER or not settings.FIRST_SUPERUSER_PASSWORD:
        return None

    email = settings.FIRST_SUPERUSER.strip().lower()
    async with manager.session() as db:
        result = await db.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()
        if existing is not None:
            return existing

        user = User(
            email=email,
            password_hash=hash_password(
                settings.FIRST_SUPERUSER_PASSWORD, settings.BCRYPT_ROUNDS
            ),
            role=UserRole.super_admin,
            nom_entreprise=settings.PROJECT_NAME,
            nom_client="Admin",
            prenom_client="Super",
        )
        db.add(user)
        await db.flush()
        logger.info(f"Created first super admin {email}")
        return user


async def init_db(manager: DatabaseSessionManager, settings: Settings) -> None:
    await create_tables(manager)
    await ensure_first_superuser(manager, settings)
