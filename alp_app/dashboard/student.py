"""Participant surface: registration, course selection, progress and claims."""

from typing import Any, Optional

from ..errors import DashboardError, InputInvalid
from ..state.models import ActionKind, ActionStatus
from .base import RoleDashboard, report_error


class StudentDashboard(RoleDashboard):
    """
    Surface for participants.

    Renders a registration card until the caller is registered, then the
    course list. Progress and claim forms act on the selected course.
    """

    def __init__(self, orchestrator, notifier):
        super().__init__(orchestrator, notifier)
        self.selected_course_id: Optional[int] = None
        self.milestones_completed = ""

    async def submit_register(self) -> ActionStatus:
        return await self._perform(
            ActionKind.REGISTER, None,
            self.orchestrator.register,
            "Registration complete",
            "You are now registered as a student.",
        )

    def select_course(self, course_id: int) -> bool:
        """Select a course from the current catalog."""
        if self.orchestrator.find_course(course_id) is None:
            report_error(
                self.notifier,
                InputInvalid(f"Course {course_id} is not in the catalog",
                             field="course_id", raw_value=str(course_id)),
                action="select_course"
            )
            return False
        self.selected_course_id = course_id
        return True

    async def submit_progress(self) -> ActionStatus:
        course_id = self.selected_course_id
        return await self._perform(
            ActionKind.UPDATE_PROGRESS, course_id,
            lambda: self.orchestrator.update_progress(course_id, self.milestones_completed),
            "Progress updated successfully!",
            "You have successfully updated your progress.",
            on_success=lambda: setattr(self, "milestones_completed", ""),
        )

    async def submit_claim(self) -> ActionStatus:
        course_id = self.selected_course_id
        return await self._perform(
            ActionKind.CLAIM_REWARD, course_id,
            lambda: self.orchestrator.claim_reward(course_id),
            "Reward claimed successfully!",
            "You have successfully claimed your reward.",
        )

    async def refresh(self) -> bool:
        """Reload the catalog, keeping the previous snapshot on failure."""
        try:
            await self.orchestrator.refresh_courses()
        except DashboardError as e:
            report_error(self.notifier, e, action="refresh_courses")
            return False
        return True

    def render(self) -> dict[str, Any]:
        if not self.orchestrator.is_registered:
            return {
                "view": "registration",
                "registering": self.is_pending(ActionKind.REGISTER),
            }

        symbol = self.orchestrator.config.ledger.currency_symbol
        decimals = self.orchestrator.decimals
        course_id = self.selected_course_id
        rendered: dict[str, Any] = {
            "view": "courses",
            "courses": [
                {
                    "id": course.id,
                    "label": course.display(symbol, decimals),
                    "selected": course.id == course_id,
                }
                for course in self.orchestrator.courses
            ],
            "selected_course_id": course_id,
        }

        if course_id is not None:
            rendered["progress"] = {
                "milestones_completed": self.milestones_completed,
                "pending": self.is_pending(ActionKind.UPDATE_PROGRESS, course_id),
            }
            rendered["claim"] = {
                "pending": self.is_pending(ActionKind.CLAIM_REWARD, course_id),
            }

        return rendered
