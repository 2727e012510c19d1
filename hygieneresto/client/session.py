"""Session controller: login, registration, startup verification and logout.

The controller is the only writer of the token store. It moves through
``SessionState`` via ``SessionStateMachine`` and listens to
``session.unauthorized`` so that any 401/403 seen by the HTTP client ends the
session exactly once.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from hygieneresto.client.exceptions import ClientError, InvalidResponseError
from hygieneresto.client.http import ApiClient
from hygieneresto.client.token_store import TokenStore
from hygieneresto.core.events import EventBus, EventTypes
from hygieneresto.core.state_machines import SessionState, SessionStateMachine
from hygieneresto.schemas.user import UserProfile

AUTH_IN_PROGRESS = "An authentication request is already in progress."
SESSION_ENDED = "The session was closed before the login completed."


@dataclass(frozen=True)
class Session:
    """Read only view of the session at one point in time."""

    state: SessionState
    token: str | None = None
    user: UserProfile | None = None
    last_error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.state in (SessionState.UNINITIALIZED, SessionState.VERIFYING)

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a login or registration attempt."""

    success: bool
    user: UserProfile | None = None
    message: str | None = None


def _parse_profile(body: Any) -> UserProfile:
    if not isinstance(body, dict):
        raise InvalidResponseError
    try:
        return UserProfile.model_validate(body["user"])
    except (KeyError, ValidationError) as e:
        raise InvalidResponseError from e


class SessionController:
    def __init__(self, api: ApiClient, store: TokenStore, event_bus: EventBus) -> None:
        self._api = api
        self._store = store
        self._event_bus = event_bus
        self._state = SessionState.UNINITIALIZED
        self._token: str | None = None
        self._user: UserProfile | None = None
        self._last_error: str | None = None
        self._subscribed = False
        # Bumped whenever credentials are dropped by logout or an unauthorized
        # response; in-flight requests compare it before applying their result
        self._epoch = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session:
        return Session(
            state=self._state,
            token=self._token,
            user=self._user,
            last_error=self._last_error,
        )

    @property
    def current_user(self) -> UserProfile | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self.session.is_loading

    @property
    def last_error(self) -> str | None:
        return self._last_error

    # Lifecycle

    async def init(self) -> bool:
        """Start listening for unauthorized responses, then restore any persisted session."""
        if not self._subscribed:
            self._event_bus.subscribe(
                EventTypes.SESSION_UNAUTHORIZED, self._on_unauthorized
            )
            self._subscribed = True
        return await self.verify_token()

    async def dispose(self) -> None:
        if self._subscribed:
            self._event_bus.unsubscribe(
                EventTypes.SESSION_UNAUTHORIZED, self._on_unauthorized
            )
            self._subscribed = False

    # State helpers; none of them await

    def _apply(self, action: str) -> None:
        target = SessionStateMachine.validate_action(self._state, action)
        logger.debug(f"Session {self._state.value} -> {target.value} ({action})")
        self._state = target

    def _move_to(self, target: SessionState, action: str) -> None:
        SessionStateMachine.validate_transition(self._state, target, action)
        logger.debug(f"Session {self._state.value} -> {target.value} ({action})")
        self._state = target

    def _forget(self) -> None:
        self._store.clear()
        self._token = None
        self._user = None

    def _settle_anonymous(self) -> None:
        match self._state:
            case SessionState.UNINITIALIZED:
                self._apply("no_token")
            case SessionState.VERIFYING:
                self._apply("reject")
            case SessionState.AUTHENTICATED:
                self._apply("logout")
            case SessionState.ANONYMOUS:
                pass

    def _end_session(self, action: str) -> bool:
        """Clear credentials; True when an authenticated session actually ended."""
        was_authenticated = self._state is SessionState.AUTHENTICATED
        self._forget()
        self._epoch += 1
        if was_authenticated:
            self._apply(action)
        return was_authenticated

    def _still_authenticated(self, epoch: int) -> bool:
        """Whether the session held before an in-flight request is intact."""
        return (
            self._epoch == epoch
            and self._token is not None
            and self._user is not None
            and self._store.get_token() == self._token
        )

    # Operations

    async def login(self, email: str, password: str) -> AuthResult:
        """Single login attempt.

        Refused without a request while another login or verification is in
        flight. On failure an intact previous session stays authenticated,
        anything else settles as anonymous; the store is left untouched and
        the error message is returned. A logout during the request discards
        its result.
        """
        if self._state is SessionState.VERIFYING:
            logger.info(f"Login for {email} refused: {AUTH_IN_PROGRESS}")
            return AuthResult(success=False, message=AUTH_IN_PROGRESS)

        prior = self._state
        epoch = self._epoch
        self._apply("login")
        try:
            body = await self._api.post(
                "/auth/login", json={"email": email, "password": password}
            )
            user = _parse_profile(body)
            token = body.get("token")
            if not isinstance(token, str) or not token:
                raise InvalidResponseError
        except ClientError as e:
            logger.info(f"Login failed for {email}: {e.message}")
            self._last_error = e.message
            if prior is SessionState.AUTHENTICATED and self._still_authenticated(epoch):
                self._move_to(SessionState.AUTHENTICATED, "login_failed")
            else:
                self._move_to(SessionState.ANONYMOUS, "login_failed")
            return AuthResult(success=False, message=e.message)

        if self._epoch != epoch:
            logger.info(f"Login for {email} discarded: logged out meanwhile")
            self._forget()
            self._apply("reject")
            return AuthResult(success=False, message=SESSION_ENDED)

        self._store.save(token, user.model_dump(mode="json"))
        self._token = token
        self._user = user
        self._last_error = None
        self._apply("accept")
        logger.info(f"Logged in as user {user.id} ({user.role.value})")
        await self._event_bus.publish(
            EventTypes.SESSION_LOGGED_IN, {"user_id": user.id, "role": user.role.value}
        )
        return AuthResult(success=True, user=user, message=body.get("message"))

    async def register(self, profile_data: Mapping[str, Any] | BaseModel) -> AuthResult:
        """Create an account. Never authenticates; the issued token is discarded."""
        if isinstance(profile_data, BaseModel):
            payload = profile_data.model_dump(mode="json", exclude_none=True)
        else:
            payload = dict(profile_data)

        try:
            body = await self._api.post("/auth/register", json=payload)
            user = _parse_profile(body)
        except ClientError as e:
            logger.info(f"Registration failed: {e.message}")
            self._last_error = e.message
            return AuthResult(success=False, message=e.message)

        self._last_error = None
        return AuthResult(success=True, user=user, message=body.get("message"))

    async def verify_token(self) -> bool:
        """Validate the persisted token against the API.

        Fails closed: any error clears the store and leaves the session
        anonymous. Without a persisted token no request is made. While a
        login or another verification is in flight nothing happens and False
        is returned; that request settles the session.
        """
        if self._state is SessionState.VERIFYING:
            logger.debug(f"Token verification skipped: {AUTH_IN_PROGRESS}")
            return False

        token = self._store.get_token()
        if not token:
            self._forget()
            self._settle_anonymous()
            return False

        epoch = self._epoch
        self._apply("verify")
        try:
            user = _parse_profile(await self._api.post("/auth/verify-token"))
        except ClientError as e:
            logger.info(f"Stored session rejected: {e.message}")
            self._forget()
            self._apply("reject")
            return False

        if self._epoch != epoch or self._store.get_token() != token:
            # Logged out while the request was in flight
            self._forget()
            self._apply("reject")
            return False

        self._store.save(token, user.model_dump(mode="json"))
        self._token = token
        self._user = user
        self._apply("accept")
        return True

    async def logout(self, reason: str = "logout") -> None:
        """Clear token and profile. Safe to call in any state."""
        if self._end_session("logout"):
            logger.info("Logged out")
            await self._event_bus.publish(
                EventTypes.SESSION_LOGGED_OUT, {"reason": reason}
            )

    async def _on_unauthorized(self, payload: dict[str, Any]) -> None:
        # Check and transition without awaiting in between. Failures seen
        # while verifying or logging in are handled by those operations.
        if self._state is not SessionState.AUTHENTICATED:
            return
        self._end_session("unauthorized")
        logger.warning(
            f"Session ended by {payload.get('status')} on {payload.get('url')}"
        )
        await self._event_bus.publish(
            EventTypes.SESSION_LOGGED_OUT, {"reason": "unauthorized", **payload}
        )
