"""
Ledger sync and action orchestrator.

Coordinates everything the dashboard does against the ledger: role
resolution on session change, catalog snapshots, and the submit → confirm
lifecycle of every state-changing action.

    Session → Role → Catalog snapshot
    Action → Local parse → Submit → Confirm → Narrow local update / re-sync
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from .config.defaults import DashboardConfig, get_default_config
from .errors import (
    ActionRejected,
    ActionReverted,
    ActionTimedOut,
    DashboardError,
    InputInvalid,
    LedgerUnavailable,
    UserRejected,
)
from .ledger.base import LedgerContract, PendingTransaction, TransactionReceipt
from .logging.config import get_action_logger
from .session.establisher import Session
from .session.roles import Role, RoleResolver
from .state.models import ActionKind, ActionRuntimeState, ActionStatus
from .state.runtime import ActionRuntimeManager, Target
from .sync.catalog import CatalogSynchronizer, Course
from .utils.currency import parse_count, parse_units

logger = structlog.get_logger(__name__)
action_logger = get_action_logger(__name__)

Submitter = Callable[[LedgerContract], Awaitable[PendingTransaction]]


@dataclass(frozen=True)
class ActionOutcome:
    """Result of a confirmed action."""
    state: ActionRuntimeState
    receipt: TransactionReceipt
    # Failure of a re-sync that ran after confirmation. The action itself
    # still took effect.
    followup_error: Optional[DashboardError] = None

    @property
    def confirmed(self) -> bool:
        return self.state.status == ActionStatus.CONFIRMED


class LedgerOrchestrator:
    """
    Main coordinator between the dashboard and the ledger.

    Holds the transient view of ledger state for one session: the caller's
    role and the last complete catalog snapshot. Neither is persisted.
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        resolver: Optional[RoleResolver] = None,
        synchronizer: Optional[CatalogSynchronizer] = None,
        runtime: Optional[ActionRuntimeManager] = None
    ) -> None:
        self.logger = logger
        self.action_logger = action_logger
        self.config = config or get_default_config()

        self.resolver = resolver or RoleResolver(self.config.timeouts)
        self.synchronizer = synchronizer or CatalogSynchronizer(
            ledger_params=self.config.ledger,
            catalog_params=self.config.catalog,
            timeout_params=self.config.timeouts,
        )
        self.runtime = runtime or ActionRuntimeManager()

        self.session: Optional[Session] = None
        self.role: Optional[Role] = None
        self.courses: tuple[Course, ...] = ()

    @property
    def decimals(self) -> int:
        return self.config.ledger.currency_decimals

    @property
    def is_registered(self) -> bool:
        return self.role == Role.REGISTERED_PARTICIPANT

    # Session lifecycle

    async def attach(self, session: Session) -> Role:
        """
        Switch to a new session and resolve its role.

        The catalog is loaded for administrators and registered participants.

        Raises:
            LedgerUnavailable: role resolution failed
            CatalogFetchFailed: the initial catalog load failed; the role is
                resolved regardless
        """
        self.session = session
        self.role = None
        self.courses = ()
        self.runtime.reset()

        self.role = await self.resolver.resolve_role(session)

        if self.role != Role.UNREGISTERED_PARTICIPANT:
            await self.refresh_courses()

        return self.role

    def detach(self) -> None:
        """Drop the session and everything derived from it."""
        self.session = None
        self.role = None
        self.courses = ()
        self.runtime.reset()

    async def resolve_role(self) -> Role:
        """Re-resolve the caller's role from the ledger."""
        self.role = await self.resolver.resolve_role(self._require_session())
        return self.role

    # Catalog

    async def refresh_courses(self) -> list[Course]:
        """
        Replace the catalog snapshot with a fresh one.

        On failure the previous snapshot is left untouched.
        """
        courses = await self.synchronizer.refresh_courses(self._require_session())
        self.courses = tuple(courses)
        return courses

    def find_course(self, course_id: int) -> Optional[Course]:
        for course in self.courses:
            if course.id == course_id:
                return course
        return None

    def action_state(self, kind: ActionKind, target: Target = None) -> ActionRuntimeState:
        caller = self.session.caller_address if self.session is not None else None
        return self.runtime.get_state(kind, target, caller)

    # Participant actions

    async def register(self) -> ActionOutcome:
        """Register the caller, then re-resolve the role and load the catalog."""
        session = self._require_session()
        state, receipt = await self._run_action(
            ActionKind.REGISTER, None,
            lambda ledger: ledger.register_student()
        )

        if not self._is_current(session, ActionKind.REGISTER):
            return ActionOutcome(state=state, receipt=receipt)

        self.role = Role.REGISTERED_PARTICIPANT
        followup_error = await self._follow_up(self.resolve_role, self.refresh_courses)
        return ActionOutcome(state=state, receipt=receipt, followup_error=followup_error)

    async def update_progress(self, course_id: Optional[int],
                              milestones_completed: Union[int, str]) -> ActionOutcome:
        """Report completed milestones for a course. The catalog is not re-read."""
        course_id = self._require_course(course_id)
        milestones = parse_count(milestones_completed, field="milestones_completed")

        state, receipt = await self._run_action(
            ActionKind.UPDATE_PROGRESS, course_id,
            lambda ledger: ledger.update_progress(course_id, milestones),
            milestones_completed=milestones
        )
        return ActionOutcome(state=state, receipt=receipt)

    async def claim_reward(self, course_id: Optional[int]) -> ActionOutcome:
        """Claim the reward for completed but unclaimed milestones."""
        course_id = self._require_course(course_id)

        state, receipt = await self._run_action(
            ActionKind.CLAIM_REWARD, course_id,
            lambda ledger: ledger.claim_reward(course_id)
        )
        return ActionOutcome(state=state, receipt=receipt)

    # Administrator actions

    async def add_course(self, name: str, description_uri: str,
                         total_milestones: Union[int, str],
                         reward_per_milestone: str) -> ActionOutcome:
        """Create a course, then re-read the catalog."""
        session = self._require_session()
        milestones = parse_count(total_milestones, field="total_milestones")
        reward = parse_units(reward_per_milestone, self.decimals, field="reward_per_milestone")

        state, receipt = await self._run_action(
            ActionKind.ADD_COURSE, None,
            lambda ledger: ledger.add_course(name, description_uri, milestones, reward),
            name=name,
            total_milestones=milestones,
            reward_per_milestone=reward
        )

        if not self._is_current(session, ActionKind.ADD_COURSE):
            return ActionOutcome(state=state, receipt=receipt)

        followup_error = await self._follow_up(self.refresh_courses)
        return ActionOutcome(state=state, receipt=receipt, followup_error=followup_error)

    async def fund_contract(self, amount: str) -> ActionOutcome:
        """Send funds to the contract for student rewards."""
        value = parse_units(amount, self.decimals, field="fund_amount")

        state, receipt = await self._run_action(
            ActionKind.FUND_CONTRACT, None,
            lambda ledger: ledger.fund_contract(value),
            value=value
        )
        return ActionOutcome(state=state, receipt=receipt)

    async def withdraw(self, amount: str) -> ActionOutcome:
        """Withdraw funds from the contract to the administrator."""
        value = parse_units(amount, self.decimals, field="withdraw_amount")

        state, receipt = await self._run_action(
            ActionKind.WITHDRAW, None,
            lambda ledger: ledger.withdraw_funds(value),
            amount=value
        )
        return ActionOutcome(state=state, receipt=receipt)

    # Lifecycle

    async def _run_action(
        self,
        kind: ActionKind,
        target: Target,
        submit: Submitter,
        **details: Any
    ) -> tuple[ActionRuntimeState, TransactionReceipt]:
        """
        Drive one action from submission to a terminal status.

        Every exit path leaves the action in a terminal status; failures are
        re-raised as the matching dashboard error.
        """
        session = self._require_session()
        self.runtime.begin(kind, target, caller=session.caller_address)

        self.action_logger.info(
            "Submitting transaction",
            action=kind.value,
            target=target,
            caller_address=session.caller_address,
            **details
        )

        try:
            pending = await submit(session.ledger)
        except ActionRejected as e:
            self._fail(session, kind, target, ActionStatus.REJECTED, "agent_declined", e)
            raise
        except UserRejected as e:
            self._fail(session, kind, target, ActionStatus.REJECTED, "agent_declined", e)
            raise ActionRejected(str(e), operation=kind.value, context=e.context) from e
        except ActionReverted as e:
            self._fail(session, kind, target, ActionStatus.REVERTED, "submission_reverted", e)
            raise
        except LedgerUnavailable as e:
            self._fail(session, kind, target, ActionStatus.UNAVAILABLE, "submission_failed", e)
            raise
        except asyncio.CancelledError:
            self._fail(session, kind, target, ActionStatus.UNAVAILABLE, "cancelled", "submission cancelled")
            raise
        except Exception as e:
            self._fail(session, kind, target, ActionStatus.UNAVAILABLE, "submission_failed", e)
            raise LedgerUnavailable(f"Submitting {kind.value} failed: {e}", operation=kind.value) from e

        tx_hash = pending.tx_hash
        self.runtime.transition(
            kind, target, ActionStatus.AWAITING_CONFIRMATION,
            trigger="submitted", tx_hash=tx_hash, caller=session.caller_address
        )

        timeout = self.config.timeouts.confirmation_timeout_seconds
        try:
            receipt = await asyncio.wait_for(pending.wait(), timeout=timeout)
        except asyncio.TimeoutError as e:
            self._fail(session, kind, target, ActionStatus.TIMED_OUT, "confirmation_timeout",
                       f"no confirmation after {timeout}s")
            raise ActionTimedOut(
                f"{kind.value} not confirmed after {timeout}s; it may still confirm later",
                operation=kind.value,
                tx_hash=tx_hash,
                timeout_seconds=timeout
            ) from e
        except ActionReverted as e:
            self._fail(session, kind, target, ActionStatus.REVERTED, "reverted", e)
            raise
        except LedgerUnavailable as e:
            self._fail(session, kind, target, ActionStatus.UNAVAILABLE, "confirmation_failed", e)
            raise
        except asyncio.CancelledError:
            self._fail(session, kind, target, ActionStatus.TIMED_OUT, "cancelled", "stopped awaiting confirmation")
            raise
        except Exception as e:
            self._fail(session, kind, target, ActionStatus.UNAVAILABLE, "confirmation_failed", e)
            raise LedgerUnavailable(
                f"Waiting for {kind.value} failed: {e}",
                operation=kind.value,
                context={"tx_hash": tx_hash}
            ) from e

        if not receipt.succeeded:
            reason = receipt.revert_reason
            self._fail(session, kind, target, ActionStatus.REVERTED, "reverted", reason or "reverted")
            raise ActionReverted(
                f"{kind.value} reverted: {reason}" if reason else f"{kind.value} reverted",
                reason=reason,
                tx_hash=tx_hash,
                operation=kind.value
            )

        state = self.runtime.transition(
            kind, target, ActionStatus.CONFIRMED,
            trigger="confirmed", tx_hash=tx_hash, caller=session.caller_address
        )
        self.action_logger.info(
            "Transaction confirmed",
            action=kind.value,
            target=target,
            tx_hash=tx_hash,
            block_number=receipt.block_number
        )
        return state, receipt

    def _fail(self, session: Session, kind: ActionKind, target: Target, status: ActionStatus,
              trigger: str, error: Union[Exception, str]) -> None:
        self.runtime.transition(
            kind, target, status,
            trigger=trigger, error=str(error), caller=session.caller_address
        )

    def _is_current(self, session: Session, kind: ActionKind) -> bool:
        """Whether the session an action was submitted under is still attached."""
        if self.session is session:
            return True
        self.logger.info(
            "Session changed while action was pending; skipping local update",
            action=kind.value,
            caller_address=session.caller_address
        )
        return False

    async def _follow_up(self, *steps: Callable[[], Awaitable[Any]]) -> Optional[DashboardError]:
        """Run post-confirmation re-reads, stopping at the first failure."""
        for step in steps:
            try:
                await step()
            except DashboardError as e:
                self.logger.error(
                    "Post-confirmation refresh failed",
                    step=getattr(step, "__name__", repr(step)),
                    error=str(e)
                )
                return e
        return None

    def _require_session(self) -> Session:
        if self.session is None:
            raise LedgerUnavailable("No active session", operation="session")
        return self.session

    def _require_course(self, course_id: Optional[int]) -> int:
        if course_id is None:
            raise InputInvalid("No course selected", field="course_id")
        if isinstance(course_id, bool) or not isinstance(course_id, int) or course_id < 1:
            raise InputInvalid(
                f"Not a valid course id: {course_id!r}",
                field="course_id",
                raw_value=str(course_id)
            )
        return course_id
