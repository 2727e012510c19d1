"""Errors raised by the session client.

Every error carries a ``message`` meant to be shown to the user as is.
"""


class ClientError(Exception):
    """Base class for session client errors."""

    default_message = "Unexpected error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ApiError(ClientError):
    """The API answered with a 4xx or 5xx status."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"Request failed with status {status_code}.")


class UnauthorizedError(ApiError):
    """The API rejected the credentials (401) or the token (403)."""


class ServerUnreachableError(ClientError):
    """No HTTP response: connection refused, DNS failure or timeout."""

    default_message = "Server unreachable."


class InvalidResponseError(ClientError):
    """The API answered 2xx with a body that does not match the contract."""

    default_message = "Unexpected response from the server."


class NotAuthenticatedError(ClientError):
    default_message = "Not authenticated."
