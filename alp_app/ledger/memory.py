"""
In-memory reference ledger.

Implements the ledger contract surface the dashboard consumes, entirely in
process. Transactions are queued on submission and executed in submission
order when a block is mined, either automatically on ``wait()`` or by an
explicit ``mine()`` call when ``auto_mine`` is off. Failure injection hooks
let callers simulate unreachable transports and failing reads.
"""

import asyncio
import hashlib
from dataclasses import dataclass
from typing import Optional

import structlog

from ..errors import ActionRejected, LedgerUnavailable, UserRejected
from .base import (
    CourseDetails,
    LedgerConnector,
    LedgerContract,
    PendingTransaction,
    SigningAgent,
    TransactionReceipt,
    TransactionRequest,
)

logger = structlog.get_logger(__name__)

ONLY_OWNER = "Only owner can call this function"
NOT_REGISTERED = "Student not registered"
NO_SUCH_COURSE = "Course does not exist"


@dataclass
class CourseRecord:
    """Ledger-side course slot."""
    name: str
    description_uri: str
    total_milestones: int
    reward_per_milestone: int
    exists: bool = True


class InMemoryLedger:
    """Authoritative ledger state held in memory."""

    def __init__(self, owner: str, auto_mine: bool = True, block_time: float = 0.0):
        self.owner_address = owner
        self.auto_mine = auto_mine
        self.block_time = block_time
        self.unavailable = False

        self.courses: dict[int, CourseRecord] = {}
        self.course_counter = 0
        self.registered: set[str] = set()
        self.progress: dict[tuple[str, int], int] = {}
        self.claimed: dict[tuple[str, int], int] = {}
        self.contract_balance = 0
        self.payouts: dict[str, int] = {}

        self.block_number = 0
        self.submitted: list[TransactionRequest] = []
        self.read_failures: dict[str, Exception] = {}
        self.read_delays: dict[int, float] = {}
        self._pending: list["InMemoryPendingTransaction"] = []
        self._nonce = 0

    # Test and demo helpers

    def seed_course(self, name: str, total_milestones: int, reward_per_milestone: int,
                    description_uri: str = "") -> int:
        """Create a course directly, bypassing the transaction path."""
        self.course_counter += 1
        self.courses[self.course_counter] = CourseRecord(
            name=name,
            description_uri=description_uri,
            total_milestones=total_milestones,
            reward_per_milestone=reward_per_milestone,
        )
        return self.course_counter

    def retire_course(self, course_id: int) -> None:
        """Tombstone a course slot so it reports exists = false."""
        self.courses[course_id].exists = False

    def fail_read(self, key: str, error: Optional[Exception] = None) -> None:
        """
        Make a view call fail.

        ``key`` is a view name, or ``get_course_details:<id>`` for a single
        course slot.
        """
        self.read_failures[key] = error or LedgerUnavailable(f"RPC error reading {key}", operation=key)

    def is_registered(self, address: str) -> bool:
        return address.lower() in self.registered

    # Reads

    def check_read(self, key: str) -> None:
        if self.unavailable:
            raise LedgerUnavailable("Ledger host unreachable", operation=key)
        if key in self.read_failures:
            raise self.read_failures[key]

    def course_details(self, course_id: int) -> CourseDetails:
        record = self.courses.get(course_id)
        if record is None:
            return CourseDetails(name="", total_milestones=0, reward_per_milestone=0, exists=False)
        return CourseDetails(
            name=record.name,
            total_milestones=record.total_milestones,
            reward_per_milestone=record.reward_per_milestone,
            exists=record.exists,
        )

    # Transactions

    def submit(self, request: TransactionRequest) -> "InMemoryPendingTransaction":
        if self.unavailable:
            raise LedgerUnavailable("Ledger host unreachable", operation=request.function)

        self._nonce += 1
        digest = hashlib.sha256(
            f"{self._nonce}:{request.sender}:{request.function}:{request.args}:{request.value}".encode()
        ).hexdigest()
        pending = InMemoryPendingTransaction(f"0x{digest}", request, self)
        self.submitted.append(request)
        self._pending.append(pending)

        logger.debug(
            "Transaction submitted",
            tx_hash=pending.tx_hash,
            function=request.function,
            sender=request.sender
        )
        return pending

    def mine(self) -> int:
        """Execute all pending transactions in submission order."""
        if not self._pending:
            return 0

        self.block_number += 1
        mined = self._pending
        self._pending = []

        for pending in mined:
            reason = self._execute(pending.request)
            pending.settle(TransactionReceipt(
                tx_hash=pending.tx_hash,
                status=0 if reason else 1,
                block_number=self.block_number,
                revert_reason=reason,
            ))

        logger.debug("Block mined", block_number=self.block_number, transactions=len(mined))
        return len(mined)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _execute(self, request: TransactionRequest) -> Optional[str]:
        """Apply a transaction. Returns a revert reason, or None on success."""
        handler = getattr(self, f"_tx_{request.function}")
        return handler(request.sender.lower(), request.value, *request.args)

    def _tx_registerStudent(self, sender: str, value: int) -> Optional[str]:
        if sender in self.registered:
            return "Student already registered"
        self.registered.add(sender)
        return None

    def _tx_addCourse(self, sender: str, value: int, name: str, description_uri: str,
                      total_milestones: int, reward_per_milestone: int) -> Optional[str]:
        if sender != self.owner_address.lower():
            return ONLY_OWNER
        self.seed_course(name, total_milestones, reward_per_milestone, description_uri)
        return None

    def _tx_fundContract(self, sender: str, value: int) -> Optional[str]:
        if value <= 0:
            return "Funding amount must be greater than 0"
        self.contract_balance += value
        return None

    def _tx_withdrawFunds(self, sender: str, value: int, amount: int) -> Optional[str]:
        if sender != self.owner_address.lower():
            return ONLY_OWNER
        if amount > self.contract_balance:
            return "Insufficient contract balance"
        self.contract_balance -= amount
        self.payouts[sender] = self.payouts.get(sender, 0) + amount
        return None

    def _tx_updateProgress(self, sender: str, value: int, course_id: int,
                           milestones_completed: int) -> Optional[str]:
        if sender not in self.registered:
            return NOT_REGISTERED
        record = self.courses.get(course_id)
        if record is None or not record.exists:
            return NO_SUCH_COURSE
        if milestones_completed > record.total_milestones:
            return "Invalid milestone count"
        self.progress[(sender, course_id)] = milestones_completed
        return None

    def _tx_claimReward(self, sender: str, value: int, course_id: int) -> Optional[str]:
        if sender not in self.registered:
            return NOT_REGISTERED
        record = self.courses.get(course_id)
        if record is None or not record.exists:
            return NO_SUCH_COURSE

        completed = self.progress.get((sender, course_id), 0)
        claimed = self.claimed.get((sender, course_id), 0)
        if completed <= claimed:
            return "No rewards to claim"

        amount = (completed - claimed) * record.reward_per_milestone
        if amount > self.contract_balance:
            return "Insufficient contract balance"

        self.contract_balance -= amount
        self.claimed[(sender, course_id)] = completed
        self.payouts[sender] = self.payouts.get(sender, 0) + amount
        return None


class InMemoryPendingTransaction(PendingTransaction):
    """Transaction queued on an InMemoryLedger."""

    def __init__(self, tx_hash: str, request: TransactionRequest, ledger: InMemoryLedger):
        super().__init__(tx_hash, request)
        self._ledger = ledger
        self._mined = asyncio.Event()
        self._receipt: Optional[TransactionReceipt] = None

    def settle(self, receipt: TransactionReceipt) -> None:
        self._receipt = receipt
        self._mined.set()

    async def wait(self) -> TransactionReceipt:
        if self._ledger.auto_mine and self._receipt is None:
            await asyncio.sleep(self._ledger.block_time)
            self._ledger.mine()

        await self._mined.wait()
        assert self._receipt is not None
        return self._receipt


class InMemoryContractHandle(LedgerContract):
    """Contract handle bound to a signer on an InMemoryLedger."""

    def __init__(self, ledger: InMemoryLedger, contract_address: str, signer: SigningAgent):
        super().__init__(contract_address, signer)
        self.ledger = ledger

    async def owner(self) -> str:
        await asyncio.sleep(0)
        self.ledger.check_read("owner")
        return self.ledger.owner_address

    async def registered_students(self, address: str) -> bool:
        await asyncio.sleep(0)
        self.ledger.check_read("registered_students")
        return self.ledger.is_registered(address)

    async def course_counter(self) -> int:
        await asyncio.sleep(0)
        self.ledger.check_read("course_counter")
        return self.ledger.course_counter

    async def get_course_details(self, course_id: int) -> CourseDetails:
        await asyncio.sleep(self.ledger.read_delays.get(course_id, 0))
        self.ledger.check_read("get_course_details")
        self.ledger.check_read(f"get_course_details:{course_id}")
        return self.ledger.course_details(course_id)

    async def add_course(self, name: str, description_uri: str,
                         total_milestones: int, reward_per_milestone: int) -> PendingTransaction:
        return await self._submit("addCourse", name, description_uri, total_milestones, reward_per_milestone)

    async def fund_contract(self, value: int) -> PendingTransaction:
        return await self._submit("fundContract", value=value)

    async def withdraw_funds(self, amount: int) -> PendingTransaction:
        return await self._submit("withdrawFunds", amount)

    async def register_student(self) -> PendingTransaction:
        return await self._submit("registerStudent")

    async def update_progress(self, course_id: int, milestones_completed: int) -> PendingTransaction:
        return await self._submit("updateProgress", course_id, milestones_completed)

    async def claim_reward(self, course_id: int) -> PendingTransaction:
        return await self._submit("claimReward", course_id)

    async def _submit(self, function: str, *args, value: int = 0) -> PendingTransaction:
        sender = await self.signer.get_address()
        request = TransactionRequest(function=function, sender=sender, args=tuple(args), value=value)
        await self.signer.approve_transaction(request)
        return self.ledger.submit(request)


class InMemoryConnector(LedgerConnector):
    """Binds InMemoryContractHandle instances."""

    def __init__(self, ledger: InMemoryLedger):
        self.ledger = ledger

    def bind(self, contract_address: str, signer: SigningAgent) -> LedgerContract:
        return InMemoryContractHandle(self.ledger, contract_address, signer)


class InMemorySigningAgent(SigningAgent):
    """Scriptable signing agent holding a single account."""

    def __init__(self, address: str, grant_access: bool = True,
                 reject_functions: Optional[set[str]] = None):
        self.address = address
        self.grant_access = grant_access
        self.reject_functions = reject_functions or set()
        self.access_requests = 0
        self.approved: list[TransactionRequest] = []

    async def request_accounts(self) -> list[str]:
        await asyncio.sleep(0)
        self.access_requests += 1
        if not self.grant_access:
            raise UserRejected("User rejected the request", request="eth_requestAccounts")
        return [self.address]

    async def get_address(self) -> str:
        return self.address

    async def approve_transaction(self, request: TransactionRequest) -> None:
        await asyncio.sleep(0)
        if "*" in self.reject_functions or request.function in self.reject_functions:
            raise ActionRejected("User denied transaction signature", operation=request.function)
        self.approved.append(request)
