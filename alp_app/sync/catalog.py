"""
Course catalog enumeration.

The ledger offers no bulk read, only a course counter and per-id detail
reads. Reads are issued concurrently but the snapshot is only produced once
every read has completed; a single failed read fails the whole refresh.
"""

import asyncio
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import structlog

from ..config.defaults import CatalogParams, LedgerParams, TimeoutParams
from ..errors import CatalogFetchFailed
from ..ledger.base import CourseDetails, LedgerContract
from ..session.establisher import Session
from ..utils.currency import format_units, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Course:
    """Client-side snapshot of one ledger course."""
    id: int
    name: str
    total_milestones: int
    reward_per_milestone: Decimal
    reward_per_milestone_base: int
    exists: bool = True

    def display(self, currency_symbol: str = "ETH", decimals: int = 18) -> str:
        """One-line label for course lists."""
        reward = format_units(self.reward_per_milestone_base, decimals)
        return (
            f"{self.name} - {self.total_milestones} milestones, "
            f"{reward} {currency_symbol} per milestone"
        )


class CatalogSynchronizer:
    """Reads the full course catalog from the ledger."""

    def __init__(
        self,
        ledger_params: Optional[LedgerParams] = None,
        catalog_params: Optional[CatalogParams] = None,
        timeout_params: Optional[TimeoutParams] = None
    ) -> None:
        self.logger = logger
        self.ledger_params = ledger_params or LedgerParams()
        self.catalog_params = catalog_params or CatalogParams()
        self.timeout_params = timeout_params or TimeoutParams()

    async def refresh_courses(self, session: Session) -> list[Course]:
        """
        Fetch every existing course, ordered by id.

        Raises:
            CatalogFetchFailed: the counter read or any detail read failed
        """
        ledger = session.ledger

        try:
            count = await asyncio.wait_for(
                ledger.course_counter(),
                timeout=self.timeout_params.read_timeout_seconds
            )
        except Exception as e:
            self.logger.error("Course counter read failed", error=str(e))
            raise CatalogFetchFailed(f"Could not read course counter: {e}") from e

        results = await self._read_all(ledger, int(count))
        results.sort(key=lambda item: item[0])

        decimals = self.ledger_params.currency_decimals
        courses = [
            Course(
                id=course_id,
                name=details.name,
                total_milestones=int(details.total_milestones),
                reward_per_milestone=to_decimal(int(details.reward_per_milestone), decimals),
                reward_per_milestone_base=int(details.reward_per_milestone),
                exists=True,
            )
            for course_id, details in results
            if details.exists
        ]

        self.logger.info(
            "Catalog refreshed",
            course_counter=count,
            visible_courses=len(courses),
            tombstoned=count - len(courses)
        )
        return courses

    async def _read_all(self, ledger: LedgerContract, count: int) -> list[tuple[int, CourseDetails]]:
        """Read details for ids 1..count, all or nothing."""
        semaphore = asyncio.Semaphore(self.catalog_params.max_concurrent_reads)

        async def read_one(course_id: int) -> tuple[int, CourseDetails]:
            async with semaphore:
                try:
                    details = await asyncio.wait_for(
                        ledger.get_course_details(course_id),
                        timeout=self.timeout_params.read_timeout_seconds
                    )
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    raise CatalogFetchFailed(
                        f"Could not read course {course_id}: {e}",
                        course_id=course_id
                    ) from e
            return course_id, details

        tasks = [asyncio.ensure_future(read_one(course_id)) for course_id in range(1, count + 1)]
        try:
            return list(await asyncio.gather(*tasks))
        except CatalogFetchFailed as e:
            self.logger.error("Course detail read failed", course_id=e.course_id, error=str(e))
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
