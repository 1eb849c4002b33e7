"""
Error classification for the dashboard.

Session errors come from negotiating with the signing agent, ledger errors
from reads and transactions against the ledger, and input errors from
local parsing of user-entered values.
"""

from .base import DashboardError
from .session import (
    SessionError,
    NoSigningAgent,
    UserRejected,
    HandshakeFailed,
)
from .ledger import (
    LedgerError,
    LedgerUnavailable,
    ActionRejected,
    ActionReverted,
    ActionTimedOut,
    CatalogFetchFailed,
)
from .input import (
    InputInvalid,
    ActionInProgress,
    StateTransitionError,
)

__all__ = [
    "DashboardError",
    # Session Errors
    "SessionError",
    "NoSigningAgent",
    "UserRejected",
    "HandshakeFailed",
    # Ledger Errors
    "LedgerError",
    "LedgerUnavailable",
    "ActionRejected",
    "ActionReverted",
    "ActionTimedOut",
    "CatalogFetchFailed",
    # Local Errors
    "InputInvalid",
    "ActionInProgress",
    "StateTransitionError",
]
