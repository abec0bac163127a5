"""Per-month progress channels for the monthly pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    month: int
    percent: int  # 0..100
    status: str


ProgressCallback = Callable[[ProgressEvent], None]


class UnitProgress:
    """Progress channel owned by a single month's unit.

    The percent never goes backwards: a lower value keeps the current
    percent but still publishes the new status label.
    """

    def __init__(self, month: int, notify: Callable[[ProgressEvent], None]) -> None:
        self.month = month
        self.percent = 0
        self.status = "대기 중"
        self._notify = notify

    @property
    def done(self) -> bool:
        return self.percent >= 100

    def update(self, percent: int, status: str) -> None:
        self.percent = max(self.percent, min(max(percent, 0), 100))
        self.status = status
        self._notify(ProgressEvent(month=self.month, percent=self.percent, status=status))


class ProgressTracker:
    """Hands out one channel per month and fans events out to callbacks."""

    def __init__(self, callbacks: list[ProgressCallback] | None = None) -> None:
        self.callbacks: list[ProgressCallback] = list(callbacks or [])
        self._units: dict[int, UnitProgress] = {}

    def channel(self, month: int) -> UnitProgress:
        unit = self._units.get(month)
        if unit is None:
            unit = UnitProgress(month, self._notify)
            self._units[month] = unit
        return unit

    def get_summary(self) -> dict[str, Any]:
        return {
            "units": [
                {"month": u.month, "percent": u.percent, "status": u.status}
                for u in sorted(self._units.values(), key=lambda u: u.month)
            ],
            "completed": sum(1 for u in self._units.values() if u.done),
        }

    def _notify(self, event: ProgressEvent) -> None:
        for cb in self.callbacks:
            try:
                cb(event)
            except Exception:
                logger.debug("Progress callback error for month %s", event.month, exc_info=True)
