"""
Runtime tracking of in-flight and finished actions.

One ActionRuntimeState is kept per (action, caller, target). A new attempt
for a triple that is still submitting or awaiting confirmation is refused.
Keying by caller keeps an action left pending by one session from blocking
or showing up in the next.
"""

from datetime import datetime, timezone
from typing import Optional, Union

import structlog

from ..errors import ActionInProgress
from .machine import ActionStateMachine, action_state_machine
from .models import (
    NO_TARGET,
    ActionKind,
    ActionRuntimeState,
    ActionStatus,
    ActionTransition,
)

logger = structlog.get_logger(__name__)

Target = Union[int, str, None]
StateKey = tuple[ActionKind, str, str]


def _target_key(target: Target) -> str:
    return NO_TARGET if target is None else str(target)


def _caller_key(caller: Optional[str]) -> str:
    # Addresses compare case-insensitively
    return NO_TARGET if caller is None else caller.lower()


class ActionRuntimeManager:
    """Manages runtime state for ledger actions."""

    def __init__(self, machine: Optional[ActionStateMachine] = None):
        self.logger = logger
        self.machine = machine or action_state_machine
        self.action_states: dict[StateKey, ActionRuntimeState] = {}

    def get_state(self, kind: ActionKind, target: Target = None,
                  caller: Optional[str] = None) -> ActionRuntimeState:
        """Current state for a triple, IDLE if never started."""
        key = (kind, _caller_key(caller), _target_key(target))
        return self.action_states.get(key, ActionRuntimeState(kind=kind, target=key[2]))

    def is_pending(self, kind: ActionKind, target: Target = None,
                   caller: Optional[str] = None) -> bool:
        return self.get_state(kind, target, caller).is_pending

    def begin(self, kind: ActionKind, target: Target = None,
              caller: Optional[str] = None) -> ActionRuntimeState:
        """
        Move a triple into SUBMITTING.

        Raises:
            ActionInProgress: the same caller already has this action
                pending for the same target
        """
        current = self.get_state(kind, target, caller)
        if current.is_pending:
            self.logger.warning(
                "Refusing concurrent resubmission",
                action=kind.value,
                target=current.target,
                caller_address=caller,
                status=current.status.value
            )
            raise ActionInProgress(
                f"{kind.value} is already {current.status.value}",
                action=kind.value,
                target=current.target
            )
        return self.transition(kind, target, ActionStatus.SUBMITTING, trigger="submit", caller=caller)

    def transition(
        self,
        kind: ActionKind,
        target: Target,
        new_status: ActionStatus,
        trigger: str,
        tx_hash: Optional[str] = None,
        error: Optional[str] = None,
        caller: Optional[str] = None
    ) -> ActionRuntimeState:
        """Apply a status change and store the result."""
        current = self.get_state(kind, target, caller)
        new_state = self.machine.apply(current, ActionTransition(
            new_status=new_status,
            trigger=trigger,
            timestamp=datetime.now(timezone.utc),
            tx_hash=tx_hash,
            error=error,
        ))
        self.action_states[(kind, _caller_key(caller), current.target)] = new_state
        return new_state

    def pending_actions(self, caller: Optional[str] = None) -> list[ActionRuntimeState]:
        """Actions currently submitting or awaiting confirmation, optionally for one caller."""
        return [
            state for key, state in self.action_states.items()
            if state.is_pending and (caller is None or key[1] == _caller_key(caller))
        ]

    def reset(self) -> None:
        """
        Forget finished action states, e.g. when the session changes.

        Pending actions are kept: their submission cannot be undone and
        they must still reach a terminal status.
        """
        finished = [key for key, state in self.action_states.items() if not state.is_pending]
        for key in finished:
            del self.action_states[key]
        if finished:
            self.logger.info("Action states cleared", cleared=len(finished))
