"""
Top-level dashboard shell.

Connects to the signing agent, resolves the caller's role and hands over to
the matching role surface.
"""

from typing import Any, Optional

import structlog

from ..config.defaults import DashboardConfig, get_default_config
from ..errors import DashboardError
from ..ledger.base import LedgerConnector, SigningAgent
from ..notifications.base import BaseNotifier
from ..notifications.stdout_notifier import StdoutNotifier
from ..orchestrator import LedgerOrchestrator
from ..session.establisher import SessionEstablisher
from ..session.roles import Role
from .admin import AdminDashboard
from .base import RoleDashboard, report_error
from .student import StudentDashboard

logger = structlog.get_logger(__name__)

VIEW_FACTORIES: dict[Role, type[RoleDashboard]] = {
    Role.ADMINISTRATOR: AdminDashboard,
    Role.UNREGISTERED_PARTICIPANT: StudentDashboard,
    Role.REGISTERED_PARTICIPANT: StudentDashboard,
}


class DashboardApp:
    """Owns the session lifecycle and the active role surface."""

    def __init__(
        self,
        establisher: SessionEstablisher,
        orchestrator: LedgerOrchestrator,
        notifier: BaseNotifier
    ) -> None:
        self.logger = logger
        self.establisher = establisher
        self.orchestrator = orchestrator
        self.notifier = notifier
        self.view: Optional[RoleDashboard] = None

    @classmethod
    def create(
        cls,
        agent: Optional[SigningAgent],
        connector: LedgerConnector,
        config: Optional[DashboardConfig] = None,
        notifier: Optional[BaseNotifier] = None
    ) -> "DashboardApp":
        """Wire up a DashboardApp from its collaborators."""
        config = config or get_default_config()
        return cls(
            establisher=SessionEstablisher(agent, connector, config.ledger),
            orchestrator=LedgerOrchestrator(config),
            notifier=notifier or StdoutNotifier(),
        )

    @property
    def role(self) -> Optional[Role]:
        return self.orchestrator.role

    async def start(self) -> bool:
        """
        Connect and build the role surface.

        Failures are reported as notifications. Returns True once a role
        surface is available.
        """
        if not self.establisher.is_available:
            self.logger.warning("No signing agent; dashboard disabled")
            return False

        try:
            session = await self.establisher.connect()
        except DashboardError as e:
            report_error(self.notifier, e, action="connect")
            return False

        try:
            await self.orchestrator.attach(session)
        except DashboardError as e:
            report_error(self.notifier, e, action="attach")

        if self.orchestrator.role is None:
            self.view = None
            return False

        self.view = VIEW_FACTORIES[self.orchestrator.role](self.orchestrator, self.notifier)
        self.logger.info(
            "Dashboard ready",
            caller_address=session.caller_address,
            role=self.orchestrator.role.value,
            courses=len(self.orchestrator.courses)
        )
        return True

    async def reconnect(self) -> bool:
        """Retry after a rejected or failed connection."""
        self.disconnect()
        return await self.start()

    def disconnect(self) -> None:
        self.establisher.disconnect()
        self.orchestrator.detach()
        self.view = None

    def render(self) -> dict[str, Any]:
        if not self.establisher.is_available:
            return {
                "view": "unavailable",
                "message": "No wallet detected. Install a signing agent to continue.",
            }

        session = self.establisher.session
        if session is None or self.view is None:
            return {
                "view": "connect",
                "message": "Please connect your wallet to continue.",
            }

        rendered = self.view.render()
        rendered["caller_address"] = session.caller_address
        rendered["role"] = self.orchestrator.role.value if self.orchestrator.role else None
        return rendered
