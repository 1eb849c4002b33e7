"""Base classes for ledger and signing agent access."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class CourseDetails:
    """Raw result of the getCourseDetails view. Reward is in base units."""
    name: str
    total_milestones: int
    reward_per_milestone: int
    exists: bool


@dataclass(frozen=True)
class TransactionRequest:
    """A state-changing call the signing agent is asked to approve."""
    function: str
    sender: str
    args: tuple[Any, ...] = field(default_factory=tuple)
    value: int = 0


@dataclass(frozen=True)
class TransactionReceipt:
    """Confirmation of a mined transaction."""
    tx_hash: str
    status: int                                  # 1 = success, 0 = reverted
    block_number: Optional[int] = None
    revert_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1


class PendingTransaction(ABC):
    """A submitted transaction whose confirmation can be awaited."""

    def __init__(self, tx_hash: str, request: TransactionRequest):
        self.tx_hash = tx_hash
        self.request = request

    @abstractmethod
    async def wait(self) -> TransactionReceipt:
        """
        Wait until the transaction is mined.

        Raises:
            ActionReverted: the ledger refused the call
            LedgerUnavailable: the ledger could not be reached
        """
        pass


class SigningAgent(ABC):
    """User-controlled component holding key material."""

    @abstractmethod
    async def request_accounts(self) -> list[str]:
        """
        Ask the user for account access.

        Raises:
            UserRejected: the user declined
        """
        pass

    @abstractmethod
    async def get_address(self) -> str:
        """Address of the currently selected account."""
        pass

    @abstractmethod
    async def approve_transaction(self, request: TransactionRequest) -> None:
        """
        Ask the user to sign a transaction.

        Raises:
            ActionRejected: the user or agent declined
        """
        pass


class LedgerContract(ABC):
    """Handle to the ledger contract bound to a signer."""

    def __init__(self, contract_address: str, signer: SigningAgent):
        self.contract_address = contract_address
        self.signer = signer

    # Views

    @abstractmethod
    async def owner(self) -> str:
        pass

    @abstractmethod
    async def registered_students(self, address: str) -> bool:
        pass

    @abstractmethod
    async def course_counter(self) -> int:
        pass

    @abstractmethod
    async def get_course_details(self, course_id: int) -> CourseDetails:
        pass

    # Transactions

    @abstractmethod
    async def add_course(self, name: str, description_uri: str,
                         total_milestones: int, reward_per_milestone: int) -> PendingTransaction:
        pass

    @abstractmethod
    async def fund_contract(self, value: int) -> PendingTransaction:
        pass

    @abstractmethod
    async def withdraw_funds(self, amount: int) -> PendingTransaction:
        pass

    @abstractmethod
    async def register_student(self) -> PendingTransaction:
        pass

    @abstractmethod
    async def update_progress(self, course_id: int, milestones_completed: int) -> PendingTransaction:
        pass

    @abstractmethod
    async def claim_reward(self, course_id: int) -> PendingTransaction:
        pass


class LedgerConnector(ABC):
    """Binds contract handles for a given signer."""

    @abstractmethod
    def bind(self, contract_address: str, signer: SigningAgent) -> LedgerContract:
        """Return a handle whose transactions are signed by ``signer``."""
        pass
