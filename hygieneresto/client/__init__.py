"""Session client for the HygieneResto API."""

from hygieneresto.client.app import ClientApplication
from hygieneresto.client.exceptions import (
    ApiError,
    ClientError,
    ServerUnreachableError,
    UnauthorizedError,
)
from hygieneresto.client.guard import AuthorizationDecision, RouteGuard, authorize
from hygieneresto.client.session import AuthResult, Session, SessionController
from hygieneresto.client.token_store import FileTokenStore, MemoryTokenStore

__all__ = [
    "ApiError",
    "AuthResult",
    "AuthorizationDecision",
    "ClientApplication",
    "ClientError",
    "FileTokenStore",
    "MemoryTokenStore",
    "RouteGuard",
    "ServerUnreachableError",
    "Session",
    "SessionController",
    "UnauthorizedError",
    "authorize",
]
