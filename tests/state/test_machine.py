"""Tests for the action state machine."""

import pytest
from datetime import datetime, timezone
from unittest.mock import Mock, patch

from alp_app.errors import StateTransitionError
from alp_app.state.machine import ALLOWED_TRANSITIONS, ActionStateMachine
from alp_app.state.models import (
    ActionKind,
    ActionRuntimeState,
    ActionStatus,
    ActionTransition,
    TERMINAL_STATUSES,
)

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def transition(status: ActionStatus, **kwargs) -> ActionTransition:
    return ActionTransition(new_status=status, trigger="test", timestamp=NOW, **kwargs)


class TestActionStatus:
    """Test status classification."""

    def test_pending_statuses(self):
        assert ActionStatus.SUBMITTING.is_pending
        assert ActionStatus.AWAITING_CONFIRMATION.is_pending
        assert not ActionStatus.IDLE.is_pending
        assert not ActionStatus.CONFIRMED.is_pending

    def test_five_terminal_outcomes(self):
        assert TERMINAL_STATUSES == {
            ActionStatus.CONFIRMED,
            ActionStatus.REJECTED,
            ActionStatus.REVERTED,
            ActionStatus.UNAVAILABLE,
            ActionStatus.TIMED_OUT,
        }
        assert all(status.is_terminal for status in TERMINAL_STATUSES)


class TestActionRuntimeState:
    """Test immutable state updates."""

    def test_with_status_returns_new_instance(self):
        state = ActionRuntimeState(kind=ActionKind.REGISTER)
        new_state = state.with_status(ActionStatus.SUBMITTING, timestamp=NOW)

        assert state.status == ActionStatus.IDLE
        assert new_state.status == ActionStatus.SUBMITTING
        assert new_state.submitted_at == NOW

    def test_tx_hash_kept_until_resubmission(self):
        state = ActionRuntimeState(kind=ActionKind.WITHDRAW, status=ActionStatus.SUBMITTING)
        awaiting = state.with_status(ActionStatus.AWAITING_CONFIRMATION, tx_hash="0xabc")
        reverted = awaiting.with_status(ActionStatus.REVERTED, error="Insufficient contract balance")

        assert reverted.tx_hash == "0xabc"
        assert reverted.error == "Insufficient contract balance"

        retry = reverted.with_status(ActionStatus.SUBMITTING, timestamp=NOW)
        assert retry.tx_hash is None
        assert retry.error is None


class TestActionStateMachine:
    """Test transition validation."""

    def setup_method(self):
        self.machine = ActionStateMachine()
        self.machine.state_logger = Mock()

    def test_happy_path(self):
        state = ActionRuntimeState(kind=ActionKind.ADD_COURSE)
        state = self.machine.apply(state, transition(ActionStatus.SUBMITTING))
        state = self.machine.apply(state, transition(ActionStatus.AWAITING_CONFIRMATION, tx_hash="0x1"))
        state = self.machine.apply(state, transition(ActionStatus.CONFIRMED))

        assert state.status == ActionStatus.CONFIRMED
        assert state.tx_hash == "0x1"

    def test_confirmation_requires_submission(self):
        state = ActionRuntimeState(kind=ActionKind.REGISTER)
        with pytest.raises(StateTransitionError) as exc_info:
            self.machine.apply(state, transition(ActionStatus.CONFIRMED))

        assert exc_info.value.current_state == "idle"
        assert exc_info.value.attempted_transition == "confirmed"
        assert exc_info.value.recoverable is False

    def test_timeout_only_while_awaiting(self):
        state = ActionRuntimeState(kind=ActionKind.REGISTER, status=ActionStatus.SUBMITTING)
        assert not self.machine.can_transition(state.status, ActionStatus.TIMED_OUT)
        with pytest.raises(StateTransitionError):
            self.machine.apply(state, transition(ActionStatus.TIMED_OUT))

    def test_rejection_only_at_submission(self):
        assert self.machine.can_transition(ActionStatus.SUBMITTING, ActionStatus.REJECTED)
        assert not self.machine.can_transition(ActionStatus.AWAITING_CONFIRMATION, ActionStatus.REJECTED)

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
    def test_terminal_states_only_allow_resubmission(self, terminal):
        assert ALLOWED_TRANSITIONS[terminal] == {ActionStatus.SUBMITTING}

    def test_transition_is_logged(self):
        state = ActionRuntimeState(kind=ActionKind.CLAIM_REWARD, target="2")

        with patch("alp_app.state.machine.log_action_transition") as log_mock:
            self.machine.apply(state, transition(ActionStatus.SUBMITTING))

        log_mock.assert_called_once()
        kwargs = log_mock.call_args.kwargs
        assert kwargs["action"] == "claim_reward"
        assert kwargs["target"] == "2"
        assert kwargs["from_state"] == "idle"
        assert kwargs["to_state"] == "submitting"
