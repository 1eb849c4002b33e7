"""
Session establishment errors.

Raised while negotiating account access with the signing agent and
binding the ledger handle.
"""

from typing import Optional

from .base import DashboardError


class SessionError(DashboardError):
    """Base class for session establishment failures."""


class NoSigningAgent(SessionError):
    """No signing agent is reachable in the execution environment."""

    def __init__(self, message: str = "No signing agent available", **kwargs):
        super().__init__(message, **kwargs)
        self.recoverable = False


class UserRejected(SessionError):
    """The user declined a request in the signing agent."""

    def __init__(self, message: str = "Request rejected by user",
                 request: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.request = request


class HandshakeFailed(SessionError):
    """Account access was granted but the ledger handle could not be bound."""

    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.stage = stage
