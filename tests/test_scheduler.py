"""Unit tests for BatchScheduler."""

from __future__ import annotations

import asyncio

import pytest

from retrospect.engines.activity_collector.models import MonthResult
from retrospect.scheduler import BatchScheduler

MONTHS = list(range(1, 13))


class Recorder:
    """Unit function that logs start/end and tracks concurrency."""

    def __init__(self, delays: dict[int, float] | None = None, fail: set[int] | None = None):
        self.delays = delays or {}
        self.fail = fail or set()
        self.log: list[tuple[str, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, month, progress):
        self.log.append(("start", month))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            progress.update(10, "working")
            await asyncio.sleep(self.delays.get(month, 0.01))
            if month in self.fail:
                raise RuntimeError(f"month {month} blew up")
            progress.update(100, "done")
            return MonthResult(month=month, summary=f"summary {month}")
        finally:
            self.in_flight -= 1
            self.log.append(("end", month))

    def index(self, event: str, month: int) -> int:
        return self.log.index((event, month))


class TestGroups:
    def test_twelve_months_in_two_groups_of_six(self):
        groups = BatchScheduler(6).groups(MONTHS)
        assert groups == [[1, 2, 3, 4, 5, 6], [7, 8, 9, 10, 11, 12]]

    def test_last_group_may_be_smaller(self):
        assert [len(g) for g in BatchScheduler(5).groups(MONTHS)] == [5, 5, 2]

    @pytest.mark.parametrize("limit", [0, -1, 2.5, True, "6"])
    def test_rejects_non_positive_limits(self, limit):
        with pytest.raises(ValueError):
            BatchScheduler(limit)


class TestGroupMode:
    @pytest.mark.anyio
    async def test_groups_run_strictly_in_sequence(self):
        unit = Recorder(delays={1: 0.05})

        await BatchScheduler(6).run(MONTHS, unit)

        last_end_group1 = max(unit.index("end", m) for m in range(1, 7))
        first_start_group2 = min(unit.index("start", m) for m in range(7, 13))
        assert last_end_group1 < first_start_group2
        assert unit.max_in_flight == 6

    @pytest.mark.anyio
    async def test_results_sorted_by_month(self):
        # Earlier months finish last
        unit = Recorder(delays={m: 0.005 * (13 - m) for m in MONTHS})

        results = await BatchScheduler(4).run(MONTHS, unit)

        assert [r.month for r in results] == MONTHS
        assert results[0].summary == "summary 1"

    @pytest.mark.anyio
    async def test_unit_failure_is_isolated(self):
        unit = Recorder(fail={3})
        events = []

        results = await BatchScheduler(6).run(MONTHS, unit, events.append)

        assert len(results) == 12
        assert results[2].month == 3
        assert results[2].summary is None
        assert results[2].activities == []
        assert all(r.summary for r in results if r.month != 3)
        month3 = [e for e in events if e.month == 3]
        assert month3[-1].percent == 100

    @pytest.mark.anyio
    async def test_progress_events_per_month_non_decreasing(self):
        events = []

        await BatchScheduler(3).run(MONTHS, Recorder(), events.append)

        for month in MONTHS:
            percents = [e.percent for e in events if e.month == month]
            assert percents == sorted(percents)
            assert percents[-1] == 100

    @pytest.mark.anyio
    async def test_empty_month_list(self):
        assert await BatchScheduler(6).run([], Recorder()) == []


class TestRefillMode:
    @pytest.mark.anyio
    async def test_next_unit_starts_when_a_slot_frees(self):
        unit = Recorder(delays={1: 0.2, 2: 0.01, 3: 0.01})

        await BatchScheduler(2, refill=True).run([1, 2, 3], unit)

        assert unit.index("start", 3) < unit.index("end", 1)
        assert unit.max_in_flight == 2

    @pytest.mark.anyio
    async def test_group_mode_waits_for_slowest(self):
        unit = Recorder(delays={1: 0.05, 2: 0.01, 3: 0.01})

        await BatchScheduler(2).run([1, 2, 3], unit)

        assert unit.index("start", 3) > unit.index("end", 1)

    @pytest.mark.anyio
    async def test_refill_results_sorted(self):
        unit = Recorder(delays={m: 0.005 * (13 - m) for m in MONTHS})

        results = await BatchScheduler(6, refill=True).run(MONTHS, unit)

        assert [r.month for r in results] == MONTHS
        assert unit.max_in_flight <= 6
