"""Root of the dashboard error hierarchy."""

from typing import Optional, Dict, Any


class DashboardError(Exception):
    """Base class for every failure surfaced to the dashboard layer."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True
