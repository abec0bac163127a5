"""Multi-row terminal progress display, one bar per month."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn

from retrospect.progress import ProgressEvent


class MonthProgressDisplay:
    """Renders :class:`ProgressEvent` updates as a stack of rich progress bars.

    Use as a context manager and pass :meth:`on_progress` to the scheduler.
    """

    def __init__(self, months: list[int], console: Console | None = None) -> None:
        self._progress = Progress(
            BarColumn(),
            TextColumn("{task.description}"),
            TextColumn("{task.fields[status]}"),
            TextColumn("{task.completed:.0f}/{task.total:.0f}"),
            console=console,
        )
        self._tasks: dict[int, TaskID] = {
            m: self._progress.add_task(f"{m}월", total=100, status="대기 중") for m in months
        }

    def on_progress(self, event: ProgressEvent) -> None:
        task_id = self._tasks.get(event.month)
        if task_id is None:
            return
        self._progress.update(task_id, completed=event.percent, status=event.status)

    def __enter__(self) -> MonthProgressDisplay:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()
