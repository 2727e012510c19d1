"""Route guard: decides whether a page may render for the current session."""

import functools
from collections.abc import Awaitable, Callable, Collection
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Concatenate, ParamSpec, TypeVar, assert_never

from loguru import logger

from hygieneresto.models.enums import UserRole
from hygieneresto.schemas.user import UserProfile

if TYPE_CHECKING:
    from hygieneresto.client.session import SessionController

LOGIN_PATH = "/login"

P = ParamSpec("P")
R = TypeVar("R")


class AuthorizationDecision(str, Enum):
    LOADING = "loading"
    ALLOW = "allow"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    REDIRECT_TO_HOME = "redirect_to_home"


def home_path_for(role: UserRole) -> str:
    """Dashboard route of a role."""
    match role:
        case UserRole.super_admin:
            return "/admin-dashboard"
        case UserRole.admin_client:
            return "/admin-client-dashboard"
        case UserRole.employer:
            return "/employee-dashboard"
        case _:
            assert_never(role)


def authorize(
    is_loading: bool,
    is_authenticated: bool,
    role: UserRole | None,
    required_roles: Collection[UserRole] = (),
) -> AuthorizationDecision:
    """Pure decision function.

    An empty ``required_roles`` admits any authenticated user.
    """
    if is_loading:
        return AuthorizationDecision.LOADING
    if not is_authenticated or role is None:
        return AuthorizationDecision.REDIRECT_TO_LOGIN
    if required_roles and role not in required_roles:
        return AuthorizationDecision.REDIRECT_TO_HOME
    return AuthorizationDecision.ALLOW


@dataclass(frozen=True)
class GuardOutcome:
    """Decision plus where to navigate when the page must not render."""

    decision: AuthorizationDecision
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.decision is AuthorizationDecision.ALLOW


class RouteGuard:
    def __init__(self, controller: "SessionController") -> None:
        self._controller = controller

    def check(self, *roles: UserRole) -> GuardOutcome:
        session = self._controller.session
        role = session.user.role if session.user else None
        decision = authorize(session.is_loading, session.is_authenticated, role, roles)

        match decision:
            case AuthorizationDecision.REDIRECT_TO_HOME if role is not None:
                return GuardOutcome(decision, home_path_for(role))
            case (
                AuthorizationDecision.REDIRECT_TO_LOGIN
                | AuthorizationDecision.REDIRECT_TO_HOME
            ):
                return GuardOutcome(AuthorizationDecision.REDIRECT_TO_LOGIN, LOGIN_PATH)
            case _:
                return GuardOutcome(decision)

    def protect(
        self, *roles: UserRole
    ) -> Callable[
        [Callable[Concatenate[UserProfile, P], Awaitable[R]]],
        Callable[P, Awaitable[R | GuardOutcome]],
    ]:
        """Decorator for async page callables.

        The page runs with the current user as first argument only when the
        guard allows it; otherwise the ``GuardOutcome`` is returned instead.
        """

        def decorator(
            func: Callable[Concatenate[UserProfile, P], Awaitable[R]],
        ) -> Callable[P, Awaitable[R | GuardOutcome]]:
            @functools.wraps(func)
            async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | GuardOutcome:
                outcome = self.check(*roles)
                user = self._controller.current_user
                if outcome.allowed and user is not None:
                    return await func(user, *args, **kwargs)
                if outcome.allowed:
                    # Authenticated state without a profile: treat as signed out
                    outcome = GuardOutcome(
                        AuthorizationDecision.REDIRECT_TO_LOGIN, LOGIN_PATH
                    )
                logger.debug(
                    f"{func.__name__}: {outcome.decision.value} {outcome.redirect_to or ''}"
                )
                return outcome

            return wrapper

        return decorator

