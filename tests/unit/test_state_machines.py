"""Tests for the session state machine."""

import pytest

from hygieneresto.core.state_machines import (
    InvalidStateTransitionError,
    SessionState,
    SessionStateMachine,
)


class TestInvalidStateTransitionError:
    """Tests for InvalidStateTransitionError exception."""

    def test_error_with_action(self) -> None:
        error = InvalidStateTransitionError(
            SessionState.ANONYMOUS, SessionState.ANONYMOUS, action="logout"
        )
        assert error.from_state == SessionState.ANONYMOUS
        assert error.action == "logout"
        assert "logout" in str(error)
        assert "anonymous" in str(error)

    def test_error_without_action(self) -> None:
        error = InvalidStateTransitionError(
            SessionState.UNINITIALIZED, SessionState.AUTHENTICATED
        )
        assert error.action is None
        assert "uninitialized" in str(error)
        assert "authenticated" in str(error)


class TestSessionStateMachine:
    @pytest.mark.parametrize(
        ("from_state", "to_state"),
        [
            (SessionState.UNINITIALIZED, SessionState.VERIFYING),
            (SessionState.UNINITIALIZED, SessionState.ANONYMOUS),
            (SessionState.VERIFYING, SessionState.AUTHENTICATED),
            (SessionState.VERIFYING, SessionState.ANONYMOUS),
            (SessionState.ANONYMOUS, SessionState.VERIFYING),
            (SessionState.AUTHENTICATED, SessionState.ANONYMOUS),
            (SessionState.AUTHENTICATED, SessionState.VERIFYING),
        ],
    )
    def test_valid_transitions(
        self, from_state: SessionState, to_state: SessionState
    ) -> None:
        assert SessionStateMachine.can_transition(from_state, to_state) is True
        SessionStateMachine.validate_transition(from_state, to_state)

    @pytest.mark.parametrize(
        ("from_state", "to_state"),
        [
            (SessionState.UNINITIALIZED, SessionState.AUTHENTICATED),
            (SessionState.ANONYMOUS, SessionState.AUTHENTICATED),
            (SessionState.ANONYMOUS, SessionState.UNINITIALIZED),
            (SessionState.AUTHENTICATED, SessionState.UNINITIALIZED),
        ],
    )
    def test_invalid_transitions(
        self, from_state: SessionState, to_state: SessionState
    ) -> None:
        assert SessionStateMachine.can_transition(from_state, to_state) is False
        with pytest.raises(InvalidStateTransitionError):
            SessionStateMachine.validate_transition(from_state, to_state, action="test")

    def test_login_from_anonymous_goes_through_verifying(self) -> None:
        state = SessionStateMachine.validate_action(SessionState.ANONYMOUS, "login")
        assert state is SessionState.VERIFYING
        state = SessionStateMachine.validate_action(state, "accept")
        assert state is SessionState.AUTHENTICATED

    def test_unauthorized_only_ends_an_authenticated_session(self) -> None:
        assert (
            SessionStateMachine.validate_action(
                SessionState.AUTHENTICATED, "unauthorized"
            )
            is SessionState.ANONYMOUS
        )
        with pytest.raises(InvalidStateTransitionError):
            SessionStateMachine.validate_action(SessionState.ANONYMOUS, "unauthorized")

    def test_unknown_action_raises(self) -> None:
        with pytest.raises(InvalidStateTransitionError, match="teleport"):
            SessionStateMachine.validate_action(SessionState.ANONYMOUS, "teleport")

    def test_get_valid_transitions(self) -> None:
        assert SessionStateMachine.get_valid_transitions(SessionState.VERIFYING) == [
            SessionState.AUTHENTICATED,
            SessionState.ANONYMOUS,
        ]
