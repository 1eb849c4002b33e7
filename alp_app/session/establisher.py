"""
Session establishment against a signing agent.

Requests account access, binds a ledger contract handle that uses the agent
as its transaction signer, and resolves the caller's address.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from ..config.defaults import LedgerParams
from ..errors import DashboardError, HandshakeFailed, NoSigningAgent, UserRejected
from ..ledger.base import LedgerConnector, LedgerContract, SigningAgent

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Session:
    """Caller address plus a ledger handle bound to it."""
    caller_address: str
    ledger: LedgerContract


class SessionEstablisher:
    """Owns the current Session."""

    def __init__(
        self,
        agent: Optional[SigningAgent],
        connector: LedgerConnector,
        ledger_params: Optional[LedgerParams] = None
    ) -> None:
        self.logger = logger
        self.agent = agent
        self.connector = connector
        self.ledger_params = ledger_params or LedgerParams()
        self.session: Optional[Session] = None

    @property
    def is_available(self) -> bool:
        """Whether a signing agent is reachable at all."""
        return self.agent is not None

    async def connect(self) -> Session:
        """
        Establish a new session.

        Re-requesting access is safe, so this may be called again after a
        rejection or to refresh the session.

        Raises:
            NoSigningAgent: no signing agent in the environment
            UserRejected: the user declined account access
            HandshakeFailed: access granted but binding the handle failed
        """
        if self.agent is None:
            self.logger.warning("Connect attempted without a signing agent")
            raise NoSigningAgent()

        try:
            accounts = await self.agent.request_accounts()
        except UserRejected:
            self.logger.info("Account access rejected by user")
            raise
        except DashboardError:
            raise
        except Exception as e:
            raise HandshakeFailed(
                f"Account request failed: {e}",
                stage="request_accounts"
            ) from e

        if not accounts:
            raise HandshakeFailed("Signing agent returned no accounts", stage="request_accounts")

        try:
            ledger = self.connector.bind(self.ledger_params.contract_address, self.agent)
            address = await self.agent.get_address()
        except DashboardError:
            raise
        except Exception as e:
            raise HandshakeFailed(
                f"Could not bind ledger handle: {e}",
                stage="bind",
                context={"contract_address": self.ledger_params.contract_address}
            ) from e

        self.session = Session(caller_address=address, ledger=ledger)
        self.logger.info(
            "Session established",
            caller_address=address,
            contract_address=self.ledger_params.contract_address
        )
        return self.session

    def disconnect(self) -> None:
        """Drop the current session."""
        if self.session is not None:
            self.logger.info("Session closed", caller_address=self.session.caller_address)
        self.session = None
