"""Password hashing and JWT bearer tokens."""

import re
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from hygieneresto.core.config import Settings
from hygieneresto.models.enums import UserRole
from hygieneresto.models.user import User

# Upper, lower, digit and one special character
_PASSWORD_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(r"[^A-Za-z\d]"),
)

__all__ = [
    "ExpiredSignatureError",
    "JWTError",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "is_strong_password",
    "verify_password",
]


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        The encoded bcrypt hash
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a bcrypt hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


def is_strong_password(password: str, min_length: int) -> bool:
    """Self registration policy: length plus one character of every class."""
    if len(password) < min_length:
        return False
    return all(pattern.search(password) for pattern in _PASSWORD_CLASSES)


def create_access_token(user: User, settings: Settings) -> str:
    """Sign a bearer token for a user.

    Claims: ``sub`` (user id), ``role``, ``client_id`` (the SIRET, for
    admin_client accounts only), ``iat`` and ``exp``.
    """
    now = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(user.id),
        "role": user.role.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    if user.role is UserRole.admin_client and user.siret:
        claims["client_id"] = user.siret
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify signature and expiry of a bearer token.

    Raises:
        ExpiredSignatureError: The token has expired
        JWTError: The token is malformed, badly signed or lacks a subject
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    if "sub" not in payload or "role" not in payload:
        raise JWTError("Token is missing required claims")
    return payload
