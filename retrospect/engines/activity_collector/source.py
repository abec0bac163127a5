"""Paginated search for one activity category — never raises."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, Protocol

import structlog

from retrospect.engines.activity_collector.github_client import ActivitySource, SearchTarget
from retrospect.engines.activity_collector.models import Activity, ActivityKind, MonthWindow

log = structlog.get_logger("retrospect.engine")

PAGE_SIZE = 100
# GitHub search never serves more than 1000 results for one query.
MAX_RESULTS = 1000
# Search API allows ~30 requests/minute.
PAGE_DELAY = 2.0  # seconds


# ── backoff policies ──────────────────────────────────────────────────────


class BackoffPolicy(Protocol):
    async def wait(self, page: int) -> None:
        """Pause before requesting *page* (always >= 2)."""
        ...


class ConstantBackoff:
    """Fixed pause between pages."""

    def __init__(self, delay: float = PAGE_DELAY) -> None:
        self.delay = delay

    async def wait(self, page: int) -> None:
        await asyncio.sleep(self.delay)


class ExponentialBackoff:
    """Pause that doubles with every page, capped at *max_delay*."""

    def __init__(self, base: float = 1.0, factor: float = 2.0, max_delay: float = 30.0) -> None:
        self.base = base
        self.factor = factor
        self.max_delay = max_delay

    def delay_for(self, page: int) -> float:
        return min(self.base * self.factor ** max(page - 2, 0), self.max_delay)

    async def wait(self, page: int) -> None:
        await asyncio.sleep(self.delay_for(page))


# ── extractors ────────────────────────────────────────────────────────────


def _commit_activity(item: dict[str, Any]) -> Activity:
    commit = item["commit"]
    return Activity(
        id=item["sha"],
        kind="commit",
        timestamp=_parse_datetime(commit["author"]["date"]),
        title=commit.get("message", "").split("\n", 1)[0],
        url=item.get("html_url", ""),
        repository=item["repository"]["name"],
    )


def _issue_like_activity(kind: ActivityKind) -> Callable[[dict[str, Any]], Activity]:
    def _extract(item: dict[str, Any]) -> Activity:
        url = item.get("html_url", "")
        return Activity(
            id=str(item["id"]),
            kind=kind,
            timestamp=_parse_datetime(item["created_at"]),
            title=item.get("title", ""),
            url=url,
            repository=repo_from_url(url),
        )

    return _extract


_SEARCHES: dict[ActivityKind, tuple[SearchTarget, str, Callable[[dict[str, Any]], Activity]]] = {
    "commit": ("commits", "author:{user} committer-date:{range}", _commit_activity),
    "pr": ("issues", "author:{user} type:pr created:{range}", _issue_like_activity("pr")),
    "issue": ("issues", "author:{user} type:issue created:{range}", _issue_like_activity("issue")),
}


def build_query(kind: ActivityKind, user: str, window: MonthWindow) -> str:
    """Search query scoping *kind* to *user* and the inclusive month range."""
    _, template, _ = _SEARCHES[kind]
    return template.format(user=user, range=window.as_query_range())


# ── source ────────────────────────────────────────────────────────────────


class PaginatedSource:
    """Fetches every page of one category search, up to the result cap.

    ``fetch`` swallows every error and hands back what was accumulated
    before the failure, so one broken category never sinks a month.
    """

    def __init__(
        self,
        source: ActivitySource,
        *,
        backoff: BackoffPolicy | None = None,
        per_page: int = PAGE_SIZE,
        max_results: int = MAX_RESULTS,
    ) -> None:
        self._source = source
        self._backoff = backoff if backoff is not None else ConstantBackoff()
        self._per_page = per_page
        self._max_results = max_results

    async def fetch(self, kind: ActivityKind, user: str, window: MonthWindow) -> list[Activity]:
        items: list[Activity] = []
        page = 1

        try:
            target, _, extract = _SEARCHES[kind]
            query = build_query(kind, user, window)
            while True:
                if page > 1:
                    await self._backoff.wait(page)

                raw = await self._source.search(
                    target, query, page=page, per_page=self._per_page
                )
                items.extend([extract(item) for item in raw])

                if len(raw) < self._per_page or len(items) >= self._max_results:
                    break
                page += 1
        except Exception as exc:
            log.warning(
                "source.fetch_failed",
                kind=kind,
                user=user,
                month=f"{window.year}-{window.month:02d}",
                page=page,
                kept=len(items),
                error=f"{type(exc).__name__}: {exc}",
            )

        return items[: self._max_results]


# ── helpers ───────────────────────────────────────────────────────────────


def repo_from_url(url: str) -> str:
    """``https://github.com/owner/repo/issues/1`` → ``repo``."""
    parts = url.split("/")
    if len(parts) < 5:
        return "unknown"
    return parts[4]


def _parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
