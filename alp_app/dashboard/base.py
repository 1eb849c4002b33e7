"""Shared behaviour of the role surfaces."""

from typing import Any, Awaitable, Callable, Optional

import structlog

from ..errors import (
    ActionInProgress,
    ActionRejected,
    ActionReverted,
    ActionTimedOut,
    CatalogFetchFailed,
    DashboardError,
    HandshakeFailed,
    InputInvalid,
    LedgerUnavailable,
    NoSigningAgent,
    UserRejected,
)
from ..notifications.base import BaseNotifier, NotificationLevel
from ..orchestrator import ActionOutcome, LedgerOrchestrator
from ..state.models import ActionKind, ActionStatus
from ..state.runtime import Target

logger = structlog.get_logger(__name__)

# Most specific first
ERROR_TITLES: list[tuple[type, str, NotificationLevel]] = [
    (InputInvalid, "Invalid input", NotificationLevel.ERROR),
    (ActionInProgress, "Action already pending", NotificationLevel.WARNING),
    (ActionRejected, "Transaction rejected", NotificationLevel.ERROR),
    (ActionReverted, "Transaction failed", NotificationLevel.ERROR),
    (ActionTimedOut, "Transaction pending", NotificationLevel.WARNING),
    (CatalogFetchFailed, "Could not load courses", NotificationLevel.ERROR),
    (LedgerUnavailable, "Ledger unavailable", NotificationLevel.ERROR),
    (NoSigningAgent, "Wallet not found", NotificationLevel.ERROR),
    (UserRejected, "Connection rejected", NotificationLevel.ERROR),
    (HandshakeFailed, "Connection failed", NotificationLevel.ERROR),
]


def describe_error(error: DashboardError) -> tuple[str, NotificationLevel]:
    """Notification title and level for an error."""
    for error_type, title, level in ERROR_TITLES:
        if isinstance(error, error_type):
            return title, level
    return "Something went wrong", NotificationLevel.ERROR


def report_error(notifier: BaseNotifier, error: DashboardError, **context: Any) -> None:
    """Log an error and notify the user about it."""
    title, level = describe_error(error)
    logger.warning(
        "Dashboard error",
        error_type=type(error).__name__,
        error=str(error),
        **context
    )
    notifier.notify(title, str(error), level, context={**error.context, **context})


class RoleDashboard:
    """Base for the per-role surfaces."""

    def __init__(self, orchestrator: LedgerOrchestrator, notifier: BaseNotifier):
        self.logger = logger
        self.orchestrator = orchestrator
        self.notifier = notifier

    def render(self) -> dict[str, Any]:
        raise NotImplementedError

    def is_pending(self, kind: ActionKind, target: Target = None) -> bool:
        return self.orchestrator.action_state(kind, target).is_pending

    async def _perform(
        self,
        kind: ActionKind,
        target: Target,
        call: Callable[[], Awaitable[ActionOutcome]],
        success_title: str,
        success_description: str,
        on_success: Optional[Callable[[], None]] = None
    ) -> ActionStatus:
        """
        Run an orchestrator action and report its outcome.

        Inputs are only cleared (via ``on_success``) once the action is
        confirmed. Local failures leave the action status untouched.
        """
        try:
            outcome = await call()
        except DashboardError as e:
            report_error(self.notifier, e, action=kind.value)
            return self.orchestrator.action_state(kind, target).status

        if on_success is not None:
            on_success()

        self.notifier.success(success_title, success_description, tx_hash=outcome.receipt.tx_hash)

        if outcome.followup_error is not None:
            report_error(self.notifier, outcome.followup_error, action=kind.value)

        return outcome.state.status
