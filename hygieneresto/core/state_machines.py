"""State machine for the client session lifecycle.

The session controller owns a single ``SessionState`` and moves it only
through the transitions declared here. The machine distinguishes user actions
(login, logout) from system-driven transitions (startup verification, forced
logout on an unauthorized response).

State Transition Diagram:

```mermaid
stateDiagram-v2
    [*] --> UNINITIALIZED
    UNINITIALIZED --> VERIFYING: verify
    UNINITIALIZED --> ANONYMOUS: no_token
    VERIFYING --> AUTHENTICATED: accept
    VERIFYING --> ANONYMOUS: reject
    UNINITIALIZED --> VERIFYING: login
    ANONYMOUS --> VERIFYING: login
    AUTHENTICATED --> VERIFYING: login / verify
    AUTHENTICATED --> ANONYMOUS: logout / unauthorized
```

Usage Example:

```python
from hygieneresto.core.state_machines import SessionState, SessionStateMachine

target = SessionStateMachine.validate_action(SessionState.ANONYMOUS, "login")
assert target is SessionState.VERIFYING
```
"""

from enum import Enum
from typing import ClassVar


class SessionState(str, Enum):
    """Lifecycle state of a client session."""

    UNINITIALIZED = "uninitialized"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class InvalidStateTransitionError(Exception):
    """Exception raised when an invalid state transition is attempted.

    Attributes:
        from_state: The current state before the attempted transition.
        to_state: The target state of the attempted transition.
        action: Optional action that triggered the transition attempt.
        message: Descriptive error message.
    """

    def __init__(
        self,
        from_state: SessionState,
        to_state: SessionState,
        action: str | None = None,
    ) -> None:
        self.from_state = from_state
        self.to_state = to_state
        self.action = action

        if action:
            self.message = (
                f"Cannot perform action '{action}': transition from "
                f"'{from_state.value}' to '{to_state.value}' is not allowed"
            )
        else:
            self.message = f"Invalid state transition from '{from_state.value}' to '{to_state.value}'"

        super().__init__(self.message)


class SessionStateMachine:
    """State machine for session state transitions.

    Valid Transitions:
        - UNINITIALIZED -> VERIFYING (verify, login), ANONYMOUS (no_token)
        - VERIFYING -> AUTHENTICATED (accept), ANONYMOUS (reject)
        - ANONYMOUS -> VERIFYING (login, verify)
        - AUTHENTICATED -> VERIFYING (login, verify), ANONYMOUS (logout, unauthorized)
    """

    TRANSITIONS: ClassVar[dict[SessionState, list[SessionState]]] = {
        SessionState.UNINITIALIZED: [SessionState.VERIFYING, SessionState.ANONYMOUS],
        SessionState.VERIFYING: [SessionState.AUTHENTICATED, SessionState.ANONYMOUS],
        SessionState.ANONYMOUS: [SessionState.VERIFYING],
        SessionState.AUTHENTICATED: [SessionState.VERIFYING, SessionState.ANONYMOUS],
    }

    ACTIONS: ClassVar[dict[str, dict[SessionState, SessionState]]] = {
        "verify": {
            SessionState.UNINITIALIZED: SessionState.VERIFYING,
            SessionState.ANONYMOUS: SessionState.VERIFYING,
            SessionState.AUTHENTICATED: SessionState.VERIFYING,
        },
        "no_token": {SessionState.UNINITIALIZED: SessionState.ANONYMOUS},
        "login": {
            SessionState.UNINITIALIZED: SessionState.VERIFYING,
            SessionState.ANONYMOUS: SessionState.VERIFYING,
            SessionState.AUTHENTICATED: SessionState.VERIFYING,
        },
        "accept": {SessionState.VERIFYING: SessionState.AUTHENTICATED},
        "reject": {SessionState.VERIFYING: SessionState.ANONYMOUS},
        "logout": {SessionState.AUTHENTICATED: SessionState.ANONYMOUS},
        "unauthorized": {SessionState.AUTHENTICATED: SessionState.ANONYMOUS},
    }

    @classmethod
    def can_transition(cls, from_state: SessionState, to_state: SessionState) -> bool:
        """Check if a state transition is valid.

        Args:
            from_state: The current state.
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in cls.TRANSITIONS.get(from_state, [])

    @classmethod
    def validate_transition(
        cls,
        from_state: SessionState,
        to_state: SessionState,
        action: str | None = None,
    ) -> None:
        """Validate a state transition and raise an error if invalid.

        Raises:
            InvalidStateTransitionError: If the transition is not valid.
        """
        if not cls.can_transition(from_state, to_state):
            raise InvalidStateTransitionError(from_state, to_state, action)

    @classmethod
    def validate_action(cls, current_state: SessionState, action: str) -> SessionState:
        """Validate an action against the current state.

        Args:
            current_state: The current session state.
            action: One of the keys of ``ACTIONS``.

        Returns:
            The target state for the action.

        Raises:
            InvalidStateTransitionError: If the action is not valid for the current state.
        """
        action_map = cls.ACTIONS.get(action)
        if action_map is None:
            raise InvalidStateTransitionError(
                current_state,
                current_state,
                action=action,
            )

        target_state = action_map.get(current_state)
        if target_state is None:
            # Find any valid target for this action to provide in error
            valid_targets = list(action_map.values())
            target_for_error = valid_targets[0] if valid_targets else current_state
            raise InvalidStateTransitionError(current_state, target_for_error, action)

        return target_state

    @classmethod
    def get_valid_transitions(cls, from_state: SessionState) -> list[SessionState]:
        """Get all valid target states from a given state."""
        return cls.TRANSITIONS.get(from_state, [])
