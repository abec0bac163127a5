"""MonthlyPipeline — wires collector + summarizer into scheduled monthly units."""

from __future__ import annotations

import structlog

from retrospect.engines.activity_collector.collector import collect_month
from retrospect.engines.activity_collector.models import MonthResult
from retrospect.engines.activity_collector.source import PaginatedSource
from retrospect.engines.summarizer.summarizer import Summarizer
from retrospect.progress import ProgressCallback, UnitProgress
from retrospect.scheduler import BatchScheduler

log = structlog.get_logger("retrospect.engine")

MONTHS = list(range(1, 13))

STATUS_FETCHING = "Github 데이터 수집 중"
STATUS_FOUND = "활동 {count}개 발견"
STATUS_NO_ACTIVITY = "활동 없음"
STATUS_SUMMARIZING = "AI 회고록 생성 중"
STATUS_DONE = "완료"


class MonthlyPipeline:
    """Collect-then-summarize for each month of one user's year."""

    def __init__(self, source: PaginatedSource, summarizer: Summarizer) -> None:
        self._source = source
        self._summarizer = summarizer

    async def process_month(
        self,
        username: str,
        year: int,
        month: int,
        progress: UnitProgress,
    ) -> MonthResult:
        """Run one month's unit, reporting checkpoints on *progress*.

        1. Collect the month's activities (10 → 50)
        2. Short-circuit empty months without calling the summarizer (100)
        3. Summarize (60 → 100)
        """
        progress.update(10, STATUS_FETCHING)
        activities = await collect_month(self._source, username, year, month)
        progress.update(50, STATUS_FOUND.format(count=len(activities)))

        if not activities:
            progress.update(100, STATUS_NO_ACTIVITY)
            return MonthResult(month=month, activities=[], summary=None)

        progress.update(60, STATUS_SUMMARIZING)
        summary = await self._summarizer.summarize(month, activities)
        progress.update(100, STATUS_DONE)
        return MonthResult(month=month, activities=activities, summary=summary)

    async def run_year(
        self,
        username: str,
        year: int,
        scheduler: BatchScheduler,
        on_progress: ProgressCallback | None = None,
        months: list[int] | None = None,
    ) -> list[MonthResult]:
        """Process every month of *year* and return results ordered by month."""

        async def _unit(month: int, progress: UnitProgress) -> MonthResult:
            return await self.process_month(username, year, month, progress)

        results = await scheduler.run(months or MONTHS, _unit, on_progress)
        log.info(
            "pipeline.year_done",
            user=username,
            year=year,
            active_months=sum(1 for r in results if r.summary is not None),
            activities=sum(len(r.activities) for r in results),
        )
        return results
