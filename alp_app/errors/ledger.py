"""
Ledger interaction errors.

These cover transport problems, ledger-side refusals and confirmation
timeouts for transactions, plus catalog enumeration failures.
"""

from typing import Optional

from .base import DashboardError
from .session import UserRejected


class LedgerError(DashboardError):
    """Base class for failures talking to the ledger."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation


class LedgerUnavailable(LedgerError):
    """Transport or RPC failure; the ledger could not be reached."""


class ActionRejected(UserRejected):
    """The user or the signing agent declined to sign a transaction."""

    def __init__(self, message: str = "Transaction rejected by signing agent",
                 operation: Optional[str] = None, **kwargs):
        super().__init__(message, request=operation, **kwargs)
        self.operation = operation


class ActionReverted(LedgerError):
    """The ledger refused the call. The reason is passed through verbatim."""

    def __init__(self, message: str, reason: Optional[str] = None,
                 tx_hash: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.reason = reason
        self.tx_hash = tx_hash


class ActionTimedOut(LedgerError):
    """Confirmation did not arrive in time. The outcome is unknown."""

    def __init__(self, message: str, tx_hash: Optional[str] = None,
                 timeout_seconds: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.tx_hash = tx_hash
        self.timeout_seconds = timeout_seconds


class CatalogFetchFailed(LedgerError):
    """A catalog point read failed, so no snapshot was produced."""

    def __init__(self, message: str, course_id: Optional[int] = None, **kwargs):
        super().__init__(message, operation="refresh_courses", **kwargs)
        self.course_id = course_id
