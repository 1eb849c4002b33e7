"""
Role resolution from ledger state.

The caller is the administrator when its address matches the ledger owner,
otherwise a participant who may or may not be registered yet.
"""

import asyncio
from enum import Enum
from typing import Optional

import structlog

from ..config.defaults import TimeoutParams
from ..errors import DashboardError, LedgerUnavailable
from ..utils.currency import same_address
from .establisher import Session

logger = structlog.get_logger(__name__)


class Role(str, Enum):
    """Closed set of caller roles."""
    ADMINISTRATOR = "administrator"
    UNREGISTERED_PARTICIPANT = "unregistered_participant"
    REGISTERED_PARTICIPANT = "registered_participant"


class RoleResolver:
    """Derives the caller's Role with view calls only."""

    def __init__(self, timeout_params: Optional[TimeoutParams] = None):
        self.logger = logger
        self.timeout_params = timeout_params or TimeoutParams()

    async def resolve_role(self, session: Session) -> Role:
        """
        Resolve the role of the session's caller.

        Raises:
            LedgerUnavailable: a view call failed or timed out; no retry is
                attempted
        """
        owner = await self._read(session.ledger.owner(), "owner")

        if same_address(owner, session.caller_address):
            role = Role.ADMINISTRATOR
        else:
            registered = await self._read(
                session.ledger.registered_students(session.caller_address),
                "registered_students"
            )
            role = Role.REGISTERED_PARTICIPANT if registered else Role.UNREGISTERED_PARTICIPANT

        self.logger.info("Role resolved", caller_address=session.caller_address, role=role.value)
        return role

    async def _read(self, call, operation: str):
        timeout = self.timeout_params.read_timeout_seconds
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise LedgerUnavailable(
                f"View call {operation} timed out after {timeout}s",
                operation=operation
            ) from e
        except LedgerUnavailable:
            raise
        except DashboardError as e:
            raise LedgerUnavailable(str(e), operation=operation, context=e.context) from e
        except Exception as e:
            raise LedgerUnavailable(f"View call {operation} failed: {e}", operation=operation) from e
