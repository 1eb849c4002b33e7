"""Administrator surface: course creation, funding and withdrawal."""

from typing import Any

from ..state.models import ActionKind, ActionStatus
from .base import RoleDashboard


class AdminDashboard(RoleDashboard):
    """Forms available to the ledger owner."""

    def __init__(self, orchestrator, notifier):
        super().__init__(orchestrator, notifier)
        self.course_name = ""
        self.description_uri = ""
        self.total_milestones = ""
        self.reward_per_milestone = ""
        self.fund_amount = ""
        self.withdraw_amount = ""

    async def submit_add_course(self) -> ActionStatus:
        return await self._perform(
            ActionKind.ADD_COURSE, None,
            lambda: self.orchestrator.add_course(
                self.course_name,
                self.description_uri,
                self.total_milestones,
                self.reward_per_milestone,
            ),
            "Course Added",
            "Course has been added successfully!",
            on_success=self._clear_course_form,
        )

    async def submit_fund(self) -> ActionStatus:
        return await self._perform(
            ActionKind.FUND_CONTRACT, None,
            lambda: self.orchestrator.fund_contract(self.fund_amount),
            "Contract Funded",
            "Contract has been funded successfully!",
            on_success=lambda: setattr(self, "fund_amount", ""),
        )

    async def submit_withdraw(self) -> ActionStatus:
        return await self._perform(
            ActionKind.WITHDRAW, None,
            lambda: self.orchestrator.withdraw(self.withdraw_amount),
            "Funds Withdrawn",
            "Funds have been withdrawn successfully!",
            on_success=lambda: setattr(self, "withdraw_amount", ""),
        )

    def _clear_course_form(self) -> None:
        self.course_name = ""
        self.description_uri = ""
        self.total_milestones = ""
        self.reward_per_milestone = ""

    def render(self) -> dict[str, Any]:
        symbol = self.orchestrator.config.ledger.currency_symbol
        decimals = self.orchestrator.decimals
        return {
            "view": "administrator",
            "add_course": {
                "course_name": self.course_name,
                "description_uri": self.description_uri,
                "total_milestones": self.total_milestones,
                "reward_per_milestone": self.reward_per_milestone,
                "pending": self.is_pending(ActionKind.ADD_COURSE),
            },
            "fund": {
                "amount": self.fund_amount,
                "currency": symbol,
                "pending": self.is_pending(ActionKind.FUND_CONTRACT),
            },
            "withdraw": {
                "amount": self.withdraw_amount,
                "currency": symbol,
                "pending": self.is_pending(ActionKind.WITHDRAW),
            },
            "courses": [course.display(symbol, decimals) for course in self.orchestrator.courses],
        }
