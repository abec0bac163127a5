"""Month collector — three category searches merged into one timeline."""

from __future__ import annotations

import asyncio
from collections import Counter

import structlog

from retrospect.engines.activity_collector.models import ACTIVITY_KINDS, Activity, MonthWindow
from retrospect.engines.activity_collector.source import PaginatedSource

log = structlog.get_logger("retrospect.engine")


async def collect_month(
    source: PaginatedSource,
    user: str,
    year: int,
    month: int,
) -> list[Activity]:
    """Collect every commit, PR and issue *user* authored in one month.

    Returns a time-ascending list. The three searches run concurrently;
    ties on timestamp keep commits before PRs before issues. Never
    raises — an unexpected failure yields an empty list.
    """
    try:
        window = MonthWindow(year, month)
        results = await asyncio.gather(
            *(source.fetch(kind, user, window) for kind in ACTIVITY_KINDS)
        )
        merged = [activity for result in results for activity in result]
        activities = sorted(merged, key=lambda a: a.timestamp)
    except Exception:
        log.exception("collector.month_failed", user=user, year=year, month=month)
        return []

    log.info(
        "collector.month_done",
        user=user,
        year=year,
        month=month,
        total=len(activities),
        by_kind=count_by_kind(activities),
    )
    return activities


def count_by_kind(activities: list[Activity]) -> dict[str, int]:
    """Count activities grouped by kind."""
    return dict(Counter(a.kind for a in activities))
