"""
Action state machine.

Validates and applies status transitions for ledger actions. Submission
always precedes confirmation, and a terminal outcome is only left by a
fresh submission.
"""

from ..errors import StateTransitionError
from ..logging.config import get_state_logger, log_action_transition
from .models import ActionRuntimeState, ActionStatus, ActionTransition, TERMINAL_STATUSES

state_logger = get_state_logger(__name__)

ALLOWED_TRANSITIONS: dict[ActionStatus, frozenset[ActionStatus]] = {
    ActionStatus.IDLE: frozenset({ActionStatus.SUBMITTING}),
    ActionStatus.SUBMITTING: frozenset({
        ActionStatus.AWAITING_CONFIRMATION,
        ActionStatus.REJECTED,
        ActionStatus.REVERTED,
        ActionStatus.UNAVAILABLE,
    }),
    ActionStatus.AWAITING_CONFIRMATION: frozenset({
        ActionStatus.CONFIRMED,
        ActionStatus.REVERTED,
        ActionStatus.UNAVAILABLE,
        ActionStatus.TIMED_OUT,
    }),
}

for _terminal in TERMINAL_STATUSES:
    ALLOWED_TRANSITIONS[_terminal] = frozenset({ActionStatus.SUBMITTING})


class ActionStateMachine:
    """Applies validated transitions to ActionRuntimeState records."""

    def __init__(self):
        self.state_logger = state_logger

    def can_transition(self, current: ActionStatus, new: ActionStatus) -> bool:
        return new in ALLOWED_TRANSITIONS.get(current, frozenset())

    def apply(self, state: ActionRuntimeState, transition: ActionTransition) -> ActionRuntimeState:
        """
        Apply a transition.

        Raises:
            StateTransitionError: the transition is not allowed from the
                current status
        """
        if not self.can_transition(state.status, transition.new_status):
            raise StateTransitionError(
                f"Cannot move {state.kind.value} from {state.status.value} "
                f"to {transition.new_status.value}",
                current_state=state.status.value,
                attempted_transition=transition.new_status.value,
                context={"action": state.kind.value, "target": state.target}
            )

        new_state = state.with_status(
            transition.new_status,
            timestamp=transition.timestamp,
            tx_hash=transition.tx_hash,
            error=transition.error,
        )

        context = {}
        if new_state.tx_hash:
            context["tx_hash"] = new_state.tx_hash
        if transition.error:
            context["error"] = transition.error

        log_action_transition(
            self.state_logger,
            action=state.kind.value,
            target=state.target,
            from_state=state.status.value,
            to_state=new_state.status.value,
            trigger=transition.trigger,
            context=context or None
        )
        return new_state


action_state_machine = ActionStateMachine()
