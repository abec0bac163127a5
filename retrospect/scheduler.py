"""BatchScheduler — runs the per-month units with bounded concurrency."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from retrospect.engines.activity_collector.models import MonthResult
from retrospect.progress import ProgressCallback, ProgressTracker, UnitProgress

logger = structlog.get_logger(__name__)

UnitFn = Callable[[int, UnitProgress], Awaitable[MonthResult]]

_FAILED_STATUS = "실패"


class BatchScheduler:
    """Runs one unit per month, at most *concurrency_limit* at a time.

    By default months are split into consecutive groups and a group only
    starts once the previous one has fully finished. With ``refill=True``
    a freed slot is handed to the next month straight away instead.
    """

    def __init__(self, concurrency_limit: int, *, refill: bool = False) -> None:
        if (
            isinstance(concurrency_limit, bool)
            or not isinstance(concurrency_limit, int)
            or concurrency_limit < 1
        ):
            raise ValueError(f"concurrency_limit must be a positive int, got {concurrency_limit!r}")
        self.concurrency_limit = concurrency_limit
        self.refill = refill

    def groups(self, months: list[int]) -> list[list[int]]:
        """Consecutive slices of *months*; the last one may be shorter."""
        size = self.concurrency_limit
        return [months[i : i + size] for i in range(0, len(months), size)]

    async def run(
        self,
        months: list[int],
        unit_fn: UnitFn,
        on_progress: ProgressCallback | None = None,
    ) -> list[MonthResult]:
        """Run *unit_fn* for every month and return results ordered by month."""
        tracker = ProgressTracker([on_progress] if on_progress is not None else None)

        if self.refill:
            results = await self._run_pool(months, unit_fn, tracker)
        else:
            results = []
            for index, group in enumerate(self.groups(list(months))):
                logger.debug("scheduler.group_start", group=index, months=group)
                results.extend(
                    await asyncio.gather(*(self._run_one(m, unit_fn, tracker) for m in group))
                )

        return sorted(results, key=lambda r: r.month)

    async def _run_pool(
        self,
        months: list[int],
        unit_fn: UnitFn,
        tracker: ProgressTracker,
    ) -> list[MonthResult]:
        sem = asyncio.Semaphore(self.concurrency_limit)

        async def _bounded(month: int) -> MonthResult:
            async with sem:
                return await self._run_one(month, unit_fn, tracker)

        return list(await asyncio.gather(*(_bounded(m) for m in months)))

    @staticmethod
    async def _run_one(month: int, unit_fn: UnitFn, tracker: ProgressTracker) -> MonthResult:
        channel = tracker.channel(month)
        try:
            return await unit_fn(month, channel)
        except Exception as exc:
            logger.error("scheduler.unit_failed", month=month, error=f"{type(exc).__name__}: {exc}")
            channel.update(100, _FAILED_STATUS)
            return MonthResult(month=month)
