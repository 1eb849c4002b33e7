"""
Local errors raised before anything reaches the ledger.
"""

from typing import Optional

from .base import DashboardError


class InputInvalid(DashboardError):
    """A user-entered value failed to parse."""

    def __init__(self, message: str, field: Optional[str] = None,
                 raw_value: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.raw_value = raw_value


class ActionInProgress(DashboardError):
    """The same action for the same target is still pending."""

    def __init__(self, message: str, action: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.action = action
        self.target = target


class StateTransitionError(DashboardError):
    """Invalid action state transition."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
        self.recoverable = False
