"""FastAPI dependencies: settings, bearer token extraction and role gating."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, Request
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from hygieneresto.core.config import Settings
from hygieneresto.core.config import settings as default_settings
from hygieneresto.core.exceptions import (
    InsufficientPermissionsError,
    InvalidOrExpiredTokenError,
    TokenMissingError,
)
from hygieneresto.core.security import JWTError, decode_access_token
from hygieneresto.db.session import get_db
from hygieneresto.models.enums import UserRole
from hygieneresto.models.user import User


def get_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return getattr(request.app.state, "settings", default_settings)


def extract_token(
    authorization: str | None = None, x_auth_token: str | None = None
) -> str | None:
    """Bearer token from ``Authorization: Bearer <t>`` or the ``x-auth-token`` header."""
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    if x_auth_token and x_auth_token.strip():
        return x_auth_token.strip()
    return None


async def get_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
    x_auth_token: Annotated[str | None, Header()] = None,
) -> str | None:
    return extract_token(authorization, x_auth_token)


async def get_current_user(
    token: Annotated[str | None, Depends(get_bearer_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Resolve the caller of a protected resource.

    A missing token is a 401. A token that fails verification, or whose user
    no longer exists, is a 403.
    """
    if token is None:
        raise TokenMissingError

    try:
        payload = decode_access_token(token, settings)
        user_id = int(payload["sub"])
    except (JWTError, ValueError) as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise InvalidOrExpiredTokenError from e

    user = await db.get(User, user_id)
    if user is None:
        logger.warning(f"Token subject {user_id} no longer exists")
        raise InvalidOrExpiredTokenError
    return user


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[User]]:
    """Dependency factory admitting only callers holding one of ``roles``."""
    allowed = frozenset(roles)

    async def _check_role(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in allowed:
            logger.info(
                f"User {current_user.id} with role {current_user.role.value} denied"
            )
            raise InsufficientPermissionsError
        return current_user

    return _check_role


CurrentUser = Annotated[User, Depends(get_current_user)]
SuperAdmin = Annotated[User, Depends(require_roles(UserRole.super_admin))]
AdminClient = Annotated[User, Depends(require_roles(UserRole.admin_client))]
Employer = Annotated[User, Depends(require_roles(UserRole.employer))]
DbSession = Annotated[AsyncSession, Depends(get_db)]
