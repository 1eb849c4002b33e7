"""
Action lifecycle data models.

Immutable records describing where each ledger action is in its
submit/confirm lifecycle.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class ActionKind(str, Enum):
    """State-changing ledger actions."""
    REGISTER = "register"
    ADD_COURSE = "add_course"
    FUND_CONTRACT = "fund_contract"
    WITHDRAW = "withdraw"
    UPDATE_PROGRESS = "update_progress"
    CLAIM_REWARD = "claim_reward"


class ActionStatus(str, Enum):
    """Lifecycle of a single action."""
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    REVERTED = "reverted"
    UNAVAILABLE = "unavailable"
    TIMED_OUT = "timed_out"                          # Outcome unknown

    @property
    def is_pending(self) -> bool:
        return self in PENDING_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


PENDING_STATUSES = frozenset({ActionStatus.SUBMITTING, ActionStatus.AWAITING_CONFIRMATION})
TERMINAL_STATUSES = frozenset({
    ActionStatus.CONFIRMED,
    ActionStatus.REJECTED,
    ActionStatus.REVERTED,
    ActionStatus.UNAVAILABLE,
    ActionStatus.TIMED_OUT,
})

NO_TARGET = "-"


@dataclass(frozen=True)
class ActionRuntimeState:
    """Runtime state for one (action, target) pair."""

    kind: ActionKind
    target: str = NO_TARGET
    status: ActionStatus = ActionStatus.IDLE

    tx_hash: Optional[str] = None
    error: Optional[str] = None

    # Wall-clock timestamps
    submitted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def with_status(self, new_status: ActionStatus,
                    timestamp: Optional[datetime] = None,
                    tx_hash: Optional[str] = None,
                    error: Optional[str] = None) -> 'ActionRuntimeState':
        """Create new state with updated status."""
        changes = {
            'status': new_status,
            'updated_at': timestamp or self.updated_at,
            'error': error,
        }

        if new_status == ActionStatus.SUBMITTING:
            # A fresh attempt forgets the previous outcome
            changes['submitted_at'] = timestamp
            changes['tx_hash'] = None
        elif tx_hash is not None:
            changes['tx_hash'] = tx_hash

        return replace(self, **changes)

    @property
    def is_pending(self) -> bool:
        return self.status.is_pending


@dataclass(frozen=True)
class ActionTransition:
    """Requested status change."""

    new_status: ActionStatus
    trigger: str
    timestamp: datetime

    tx_hash: Optional[str] = None
    error: Optional[str] = None
