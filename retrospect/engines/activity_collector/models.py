"""Data models for the activity collector engine."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

ActivityKind = Literal["commit", "pr", "issue"]

ACTIVITY_KINDS: tuple[ActivityKind, ...] = ("commit", "pr", "issue")


@dataclass(frozen=True)
class Activity:
    """A single commit, pull request or issue authored by the user.

    Pure data structure — built once from a search result, never mutated.
    """

    id: str  # commit SHA / item id
    kind: ActivityKind
    timestamp: datetime
    title: str
    url: str
    repository: str


@dataclass(frozen=True)
class MonthWindow:
    """Inclusive date range covering one calendar month."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        last_day = calendar.monthrange(self.year, self.month)[1]
        return date(self.year, self.month, last_day)

    def as_query_range(self) -> str:
        """Render as the ``YYYY-MM-DD..YYYY-MM-DD`` search qualifier value."""
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass
class MonthResult:
    """Outcome of one month's collect → summarize unit.

    ``summary`` stays ``None`` when the month had no activity or the unit
    failed; such months are left out of the report.
    """

    month: int
    activities: list[Activity] = field(default_factory=list)
    summary: str | None = None
