"""Tests for the session controller against a mocked API."""

import asyncio
import json
from collections.abc import Awaitable, Callable

import httpx
import pytest

from hygieneresto.client.app import ClientApplication
from hygieneresto.client.exceptions import UnauthorizedError
from hygieneresto.client.guard import LOGIN_PATH, AuthorizationDecision
from hygieneresto.client.session import AUTH_IN_PROGRESS, SESSION_ENDED
from hygieneresto.client.token_store import MemoryTokenStore
from hygieneresto.core.config import Settings
from hygieneresto.core.events import EventTypes
from hygieneresto.core.state_machines import SessionState
from hygieneresto.models.enums import UserRole

ADMIN_CLIENT = {
    "id": 1,
    "email": "claire@bistrot.fr",
    "role": "admin_client",
    "company_name": "Le Petit Bistrot",
    "siret": "12345678900012",
}
EMPLOYEE = {
    "id": 2,
    "email": "paul@bistrot.fr",
    "role": "employer",
    "admin_client_siret": "12345678900012",
}

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]


def make_client(handler: Handler, store: MemoryTokenStore | None = None) -> ClientApplication:
    return ClientApplication(
        Settings(),
        token_store=store or MemoryTokenStore(),
        transport=httpx.MockTransport(handler),
        base_url="http://api.bistrot.fr/api",
    )


class FakeApi:
    """Minimal backend: fixed credentials, one valid token, everything else 401."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.verify_status = 200
        self.verify_user = EMPLOYEE
        # When set, requests wait on it so a test can act while they are in flight
        self.gate: asyncio.Event | None = None

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        await asyncio.sleep(0)
        if self.gate is not None:
            await self.gate.wait()
        path = request.url.path
        if path == "/api/auth/login":
            if json.loads(request.content)["password"] == "Commis#Password1":
                return httpx.Response(
                    200, json={"message": "Login successful.", "token": "good", "user": EMPLOYEE}
                )
            return httpx.Response(401, json={"message": "Incorrect email or password."})
        if path == "/api/auth/register":
            return httpx.Response(
                201,
                json={"message": "User registered successfully.", "token": "new", "user": ADMIN_CLIENT},
            )
        if path == "/api/auth/verify-token":
            if self.verify_status != 200:
                return httpx.Response(self.verify_status, json={"message": "Invalid token."})
            return httpx.Response(200, json={"message": "Valid token.", "user": self.verify_user})
        return httpx.Response(401, json={"message": "Invalid or expired token."})

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.mark.asyncio
async def test_init_without_token_makes_no_request(api: FakeApi) -> None:
    async with make_client(api) as client:
        assert client.session.state is SessionState.ANONYMOUS
        assert client.session.is_authenticated is False
        assert api.requests == []


@pytest.mark.asyncio
async def test_init_restores_persisted_session(api: FakeApi) -> None:
    store = MemoryTokenStore(token="good", user=EMPLOYEE)

    async with make_client(api, store) as client:
        assert client.session.state is SessionState.AUTHENTICATED
        assert client.session.current_user.role is UserRole.employer
        assert api.requests[0].headers["Authorization"] == "Bearer good"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403])
async def test_rejected_token_clears_storage(api: FakeApi, status_code: int) -> None:
    api.verify_status = status_code
    store = MemoryTokenStore(token="stale", user=EMPLOYEE)

    async with make_client(api, store) as client:
        assert client.session.state is SessionState.ANONYMOUS
        assert store.get_token() is None
        assert store.get_user() is None
        outcome = client.guard.check(UserRole.employer)
        assert outcome.decision is AuthorizationDecision.REDIRECT_TO_LOGIN
        assert outcome.redirect_to == LOGIN_PATH


@pytest.mark.asyncio
async def test_invalid_profile_fails_closed(api: FakeApi) -> None:
    api.verify_user = {"id": 2, "email": "paul@bistrot.fr", "role": "employer"}
    store = MemoryTokenStore(token="good", user=EMPLOYEE)

    async with make_client(api, store) as client:
        assert client.session.state is SessionState.ANONYMOUS
        assert store.get_token() is None


@pytest.mark.asyncio
async def test_login_success_persists_token_and_profile(api: FakeApi) -> None:
    logged_in: list[dict] = []

    async with make_client(api) as client:

        async def on_login(payload: dict) -> None:
            logged_in.append(payload)

        client.events.subscribe(EventTypes.SESSION_LOGGED_IN, on_login)

        result = await client.session.login("paul@bistrot.fr", "Commis#Password1")

        assert result.success is True
        assert result.user.admin_client_siret == "12345678900012"
        assert client.session.state is SessionState.AUTHENTICATED
        assert client.token_store.get_token() == "good"
        assert client.token_store.get_user()["email"] == "paul@bistrot.fr"
        assert logged_in == [{"user_id": 2, "role": "employer"}]


@pytest.mark.asyncio
async def test_failed_login_leaves_state_and_storage(api: FakeApi) -> None:
    store = MemoryTokenStore(token="good", user=EMPLOYEE)

    async with make_client(api, store) as client:
        result = await client.session.login("paul@bistrot.fr", "wrong")

        assert result.success is False
        assert result.message == "Incorrect email or password."
        assert client.session.last_error == "Incorrect email or password."
        # still logged in with the previous credentials
        assert client.session.state is SessionState.AUTHENTICATED
        assert store.get_token() == "good"


@pytest.mark.asyncio
async def test_login_when_server_unreachable() -> None:
    async def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async with make_client(down) as client:
        result = await client.session.login("paul@bistrot.fr", "Commis#Password1")

        assert result.success is False
        assert result.message == "Server unreachable."
        assert client.session.state is SessionState.ANONYMOUS


@pytest.mark.asyncio
async def test_register_never_authenticates(api: FakeApi) -> None:
    async with make_client(api) as client:
        result = await client.session.register({"email": "claire@bistrot.fr"})

        assert result.success is True
        assert result.user.role is UserRole.admin_client
        assert client.session.state is SessionState.ANONYMOUS
        assert client.token_store.get_token() is None


@pytest.mark.asyncio
async def test_logout_is_idempotent(api: FakeApi) -> None:
    logged_out: list[dict] = []

    async with make_client(api, MemoryTokenStore(token="good", user=EMPLOYEE)) as client:

        async def on_logout(payload: dict) -> None:
            logged_out.append(payload)

        client.events.subscribe(EventTypes.SESSION_LOGGED_OUT, on_logout)

        await client.session.logout()
        await client.session.logout()

        assert client.session.state is SessionState.ANONYMOUS
        assert client.token_store.get_token() is None
        assert logged_out == [{"reason": "logout"}]

        # verification after logout makes no request
        sent = len(api.requests)
        assert await client.session.verify_token() is False
        assert len(api.requests) == sent


@pytest.mark.asyncio
async def test_concurrent_unauthorized_responses_end_session_once(api: FakeApi) -> None:
    logged_out: list[dict] = []

    async with make_client(api, MemoryTokenStore(token="good", user=EMPLOYEE)) as client:
        assert client.session.is_authenticated

        async def on_logout(payload: dict) -> None:
            logged_out.append(payload)

        client.events.subscribe(EventTypes.SESSION_LOGGED_OUT, on_logout)

        results = await asyncio.gather(
            *(client.api.get("/employer/temperatures") for _ in range(5)),
            return_exceptions=True,
        )

        assert all(isinstance(result, UnauthorizedError) for result in results)
        assert len(logged_out) == 1
        assert logged_out[0]["reason"] == "unauthorized"
        assert client.session.state is SessionState.ANONYMOUS
        assert client.token_store.get_token() is None


@pytest.mark.asyncio
async def test_dispose_unsubscribes(api: FakeApi) -> None:
    client = make_client(api)
    await client.init()
    assert client.events.handler_count(EventTypes.SESSION_UNAUTHORIZED) == 1

    await client.dispose()

    assert client.events.handler_count(EventTypes.SESSION_UNAUTHORIZED) == 0


async def wait_for_state(client: ClientApplication, state: SessionState) -> None:
    for _ in range(100):
        if client.session.state is state:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"session never reached {state.value}")


@pytest.mark.asyncio
async def test_double_submitted_login_sends_one_request(api: FakeApi) -> None:
    async with make_client(api) as client:
        first, second = await asyncio.gather(
            client.session.login("paul@bistrot.fr", "Commis#Password1"),
            client.session.login("paul@bistrot.fr", "Commis#Password1"),
        )

        assert first.success is True
        assert second.success is False
        assert second.message == AUTH_IN_PROGRESS
        assert api.paths().count("/api/auth/login") == 1
        assert client.session.state is SessionState.AUTHENTICATED


@pytest.mark.asyncio
async def test_login_while_startup_verification_pending(api: FakeApi) -> None:
    api.gate = asyncio.Event()
    client = make_client(api, MemoryTokenStore(token="good", user=EMPLOYEE))
    startup = asyncio.create_task(client.init())
    try:
        await wait_for_state(client, SessionState.VERIFYING)

        result = await client.session.login("paul@bistrot.fr", "Commis#Password1")
        assert result.success is False
        assert result.message == AUTH_IN_PROGRESS
        assert await client.session.verify_token() is False

        api.gate.set()
        await startup

        assert client.session.state is SessionState.AUTHENTICATED
        assert api.paths() == ["/api/auth/verify-token"]
    finally:
        await client.dispose()


@pytest.mark.asyncio
async def test_logout_during_failed_relogin_leaves_no_partial_session(
    api: FakeApi,
) -> None:
    async with make_client(api, MemoryTokenStore(token="good", user=EMPLOYEE)) as client:
        assert client.session.is_authenticated

        api.gate = asyncio.Event()
        attempt = asyncio.create_task(client.session.login("paul@bistrot.fr", "wrong"))
        await wait_for_state(client, SessionState.VERIFYING)
        await client.session.logout()
        api.gate.set()
        result = await attempt

        assert result.success is False
        session = client.session.session
        assert session.state is SessionState.ANONYMOUS
        assert session.token is None
        assert session.user is None
        assert client.token_store.get_token() is None
        assert client.guard.check().redirect_to == LOGIN_PATH


@pytest.mark.asyncio
async def test_logout_during_login_discards_the_new_session(api: FakeApi) -> None:
    async with make_client(api) as client:
        api.gate = asyncio.Event()
        attempt = asyncio.create_task(
            client.session.login("paul@bistrot.fr", "Commis#Password1")
        )
        await wait_for_state(client, SessionState.VERIFYING)
        await client.session.logout()
        api.gate.set()
        result = await attempt

        assert result.success is False
        assert result.message == SESSION_ENDED
        assert client.session.state is SessionState.ANONYMOUS
        assert client.token_store.get_token() is None
