"""Shared fixtures: a temporary SQLite database, the running API and seeded accounts."""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from hygieneresto.client.app import ClientApplication
from hygieneresto.client.token_store import MemoryTokenStore
from hygieneresto.core.config import Settings
from hygieneresto.main import create_app
from tests.helpers import (
    EMPLOYEE_EMAIL,
    EMPLOYEE_PASSWORD,
    SUPERUSER_EMAIL,
    SUPERUSER_PASSWORD,
    auth_headers,
    register_payload,
)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'hygieneresto.db'}",
        ENVIRONMENT="testing",
        SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        FIRST_SUPERUSER=SUPERUSER_EMAIL,
        FIRST_SUPERUSER_PASSWORD=SUPERUSER_PASSWORD,
        log_level="WARNING",
        CLIENT_TOKEN_STORE_PATH=str(tmp_path / "session.json"),
        CLIENT_API_BASE_URL="http://test/api",
    )


@pytest.fixture
def db_settings(test_settings: Settings) -> Settings:
    return test_settings


@pytest_asyncio.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI]:
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api") as c:
        yield c


@pytest_asyncio.fixture
async def super_admin_token(client: httpx.AsyncClient) -> str:
    response = await client.post(
        "/auth/login", json={"email": SUPERUSER_EMAIL, "password": SUPERUSER_PASSWORD}
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest_asyncio.fixture
async def admin_client_account(client: httpx.AsyncClient) -> dict[str, Any]:
    """A self registered admin client: ``{"token": ..., "user": {...}}``."""
    response = await client.post("/auth/register", json=register_payload())
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def employee_account(
    client: httpx.AsyncClient, admin_client_account: dict[str, Any]
) -> dict[str, Any]:
    """An employee created by the admin client, then logged in."""
    response = await client.post(
        "/admin-client/employees",
        json={
            "nom_client": "Durand",
            "prenom_client": "Paul",
            "email": EMPLOYEE_EMAIL,
            "password": EMPLOYEE_PASSWORD,
        },
        headers=auth_headers(admin_client_account["token"]),
    )
    assert response.status_code == 201, response.text

    login = await client.post(
        "/auth/login", json={"email": EMPLOYEE_EMAIL, "password": EMPLOYEE_PASSWORD}
    )
    assert login.status_code == 200, login.text
    return login.json()


@pytest_asyncio.fixture
async def client_app(
    app: FastAPI, test_settings: Settings
) -> AsyncGenerator[ClientApplication]:
    """Session client wired to the in-process API, not yet initialized."""
    application = ClientApplication(
        test_settings,
        token_store=MemoryTokenStore(),
        transport=httpx.ASGITransport(app=app),
    )
    yield application
    await application.dispose()
