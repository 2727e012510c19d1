"""Composition root of the session client."""

from types import TracebackType
from typing import Self

import httpx
from loguru import logger

from hygieneresto.client.guard import RouteGuard
from hygieneresto.client.http import ApiClient
from hygieneresto.client.resources import TemperatureClient, TraceabilityClient
from hygieneresto.client.session import SessionController
from hygieneresto.client.token_store import FileTokenStore, TokenStore
from hygieneresto.core.config import Settings
from hygieneresto.core.config import settings as default_settings
from hygieneresto.core.events import EventBus


class ClientApplication:
    """Builds one event bus, token store, HTTP client and session controller.

    Example usage:
        async with ClientApplication() as client:
            result = await client.session.login("chef@bistro.fr", "...")
            outcome = client.guard.check(UserRole.admin_client)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        token_store: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.events = EventBus()
        self.token_store = token_store or FileTokenStore(
            self.settings.CLIENT_TOKEN_STORE_PATH
        )
        self.api = ApiClient(
            base_url=base_url or self.settings.CLIENT_API_BASE_URL,
            event_bus=self.events,
            token_provider=self.token_store.get_token,
            timeout=self.settings.CLIENT_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.session = SessionController(self.api, self.token_store, self.events)
        self.guard = RouteGuard(self.session)
        self.traceability = TraceabilityClient(self.api, self.session)
        self.temperatures = TemperatureClient(self.api, self.session)

    async def init(self) -> None:
        restored = await self.session.init()
        logger.debug(f"Client session initialized (restored={restored})")

    async def dispose(self) -> None:
        await self.session.dispose()
        await self.api.aclose()

    async def __aenter__(self) -> Self:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()
