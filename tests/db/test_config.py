"""Tests for the Settings object shared by the backend and the session client."""

import os
from collections.abc import Generator

import pytest
from pydantic import ValidationError

from hygieneresto.core.config import Settings

# Constants for default config values
DEFAULT_POOL_SIZE = 5
DEFAULT_MAX_OVERFLOW = 10
DEFAULT_POOL_TIMEOUT = 30
DEFAULT_POOL_RECYCLE = 1800
DEFAULT_TOKEN_LIFETIME = 480


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None]:
    """Clean environment variables before each test."""
    old_environ = dict(os.environ)
    os.environ.clear()
    yield
    os.environ.clear()
    os.environ.update(old_environ)


def test_settings_database_uri_construction() -> None:
    """Without DATABASE_URL the URI is built from the POSTGRES_* settings."""
    settings = Settings(
        POSTGRES_SERVER="localhost",
        POSTGRES_USER="testuser",
        POSTGRES_PASSWORD="testpass",
        POSTGRES_DB="testdb",
    )
    uri = settings.sqlalchemy_database_uri
    assert "postgresql+psycopg://" in uri
    assert "testuser" in uri
    assert "testpass" in uri
    assert "localhost" in uri
    assert "testdb" in uri


def test_database_url_overrides_postgres() -> None:
    settings = Settings(
        DATABASE_URL="sqlite+aiosqlite:///./dev.db", POSTGRES_SERVER="db.internal"
    )
    assert settings.sqlalchemy_database_uri == "sqlite+aiosqlite:///./dev.db"


def test_settings_pool_size_validation() -> None:
    settings = Settings(DB_POOL_SIZE=5)
    assert settings.DB_POOL_SIZE == DEFAULT_POOL_SIZE

    with pytest.raises(ValidationError):
        Settings(DB_POOL_SIZE=0)

    with pytest.raises(ValidationError):
        Settings(DB_POOL_SIZE=21)


def test_settings_pool_recycle_validation() -> None:
    settings = Settings(DB_POOL_RECYCLE=-1)
    assert settings.DB_POOL_RECYCLE == -1

    with pytest.raises(ValidationError):
        Settings(DB_POOL_RECYCLE=-2)


def test_settings_defaults() -> None:
    """Test default values for the pool, token and client settings."""
    settings = Settings()
    assert settings.DB_POOL_SIZE == DEFAULT_POOL_SIZE
    assert settings.DB_MAX_OVERFLOW == DEFAULT_MAX_OVERFLOW
    assert settings.DB_POOL_TIMEOUT == DEFAULT_POOL_TIMEOUT
    assert settings.DB_POOL_RECYCLE == DEFAULT_POOL_RECYCLE
    assert settings.DB_ECHO is False
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == DEFAULT_TOKEN_LIFETIME
    assert settings.JWT_ALGORITHM == "HS256"
    assert settings.API_PREFIX == "/api"
    assert settings.FIRST_SUPERUSER is None


def test_security_settings_validation() -> None:
    with pytest.raises(ValidationError):
        Settings(ACCESS_TOKEN_EXPIRE_MINUTES=0)

    with pytest.raises(ValidationError):
        Settings(BCRYPT_ROUNDS=3)

    with pytest.raises(ValidationError):
        Settings(PASSWORD_MIN_LENGTH=4)


def test_client_timeout_must_be_positive() -> None:
    assert Settings(CLIENT_TIMEOUT_SECONDS=2.5).CLIENT_TIMEOUT_SECONDS == 2.5

    with pytest.raises(ValidationError):
        Settings(CLIENT_TIMEOUT_SECONDS=0)


def test_settings_from_environment() -> None:
    """Test that settings can be loaded from environment variables."""
    os.environ["DB_POOL_SIZE"] = "10"
    os.environ["DB_ECHO"] = "true"
    os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "60"
    os.environ["CLIENT_API_BASE_URL"] = "https://hygieneresto.example/api"
    os.environ["BACKEND_CORS_ORIGINS"] = '["http://localhost:5173"]'

    settings = Settings()
    assert settings.DB_POOL_SIZE == 10
    assert settings.DB_ECHO is True
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 60
    assert settings.CLIENT_API_BASE_URL == "https://hygieneresto.example/api"
    assert [str(origin) for origin in settings.BACKEND_CORS_ORIGINS] == [
        "http://localhost:5173/"
    ]
