"""HTTP client wrapper around ``httpx.AsyncClient``.

Every request carries ``Authorization: Bearer <token>`` when a token is
stored. Every 401/403 response publishes ``session.unauthorized`` on the
event bus before the error reaches the caller, so the session controller can
run its single logout path. Requests are never retried.
"""

from collections.abc import Callable
from typing import Any

import httpx
from loguru import logger

from hygieneresto.client.exceptions import (
    ApiError,
    InvalidResponseError,
    ServerUnreachableError,
    UnauthorizedError,
)
from hygieneresto.core.events import EventBus, EventTypes

TokenProvider = Callable[[], str | None]

_UNAUTHORIZED_STATUSES = frozenset({401, 403})


def error_message(response: httpx.Response) -> str | None:
    """The ``message`` field of an error body, when there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


class ApiClient:
    """Authenticated JSON client for the HygieneResto API."""

    def __init__(
        self,
        base_url: str,
        event_bus: EventBus,
        token_provider: TokenProvider,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._event_bus = event_bus
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
            event_hooks={
                "request": [self._attach_token],
                "response": [self._signal_unauthorized],
            },
        )

    async def _attach_token(self, request: httpx.Request) -> None:
        token = self._token_provider()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def _signal_unauthorized(self, response: httpx.Response) -> None:
        if response.status_code not in _UNAUTHORIZED_STATUSES:
            return
        logger.debug(
            f"{response.request.method} {response.request.url.path} -> {response.status_code}"
        )
        await self._event_bus.publish(
            EventTypes.SESSION_UNAUTHORIZED,
            {"status": response.status_code, "url": str(response.request.url)},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (``None`` when empty).

        Raises:
            ServerUnreachableError: No response was received
            UnauthorizedError: The API answered 401 or 403
            ApiError: The API answered any other 4xx or 5xx status
            InvalidResponseError: A 2xx body is not JSON
        """
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {type(e).__name__}")
            raise ServerUnreachableError from e

        if response.status_code in _UNAUTHORIZED_STATUSES:
            raise UnauthorizedError(response.status_code, error_message(response))
        if response.is_error:
            raise ApiError(response.status_code, error_message(response))

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError from e

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()
