"""Tests for per-month progress channels."""

from __future__ import annotations

from retrospect.progress import ProgressEvent, ProgressTracker


class TestUnitProgress:
    def test_update_publishes_event(self):
        events = []
        tracker = ProgressTracker([events.append])

        tracker.channel(3).update(10, "fetching")

        assert events == [ProgressEvent(month=3, percent=10, status="fetching")]

    def test_percent_never_decreases(self):
        events = []
        tracker = ProgressTracker([events.append])
        unit = tracker.channel(1)

        unit.update(60, "summarizing")
        unit.update(50, "late update")

        assert unit.percent == 60
        assert events[-1] == ProgressEvent(month=1, percent=60, status="late update")

    def test_percent_clamped(self):
        unit = ProgressTracker().channel(1)
        unit.update(150, "over")
        assert unit.percent == 100
        assert unit.done

    def test_channel_is_per_month(self):
        tracker = ProgressTracker()
        assert tracker.channel(1) is tracker.channel(1)
        assert tracker.channel(1) is not tracker.channel(2)


class TestProgressTracker:
    def test_callback_error_does_not_propagate(self):
        def broken(event):
            raise RuntimeError("display gone")

        seen = []
        tracker = ProgressTracker([broken, seen.append])

        tracker.channel(2).update(10, "fetching")

        assert len(seen) == 1

    def test_summary(self):
        tracker = ProgressTracker()
        tracker.channel(2).update(100, "완료")
        tracker.channel(1).update(50, "활동 3개 발견")

        summary = tracker.get_summary()

        assert [u["month"] for u in summary["units"]] == [1, 2]
        assert summary["completed"] == 1

    def test_initial_state(self):
        unit = ProgressTracker().channel(4)
        assert unit.percent == 0
        assert unit.status == "대기 중"
