"""Once-per-second countdown over the daily report window."""

from __future__ import annotations

from datetime import date, datetime

import structlog

from dailyreport.core.clock import Clock, elapsed, local_day
from dailyreport.core.events import EventChannel, EventStream
from dailyreport.core.window import WindowSettings, classify, next_start
from dailyreport.models.status import ReportStatus
from dailyreport.models.window import TimerLabel, TimerSnapshot, WindowPhase

logger = structlog.get_logger(__name__)


class TimerEvaluator:
    """Derive the countdown label, remaining time and progress for each tick.

    The evaluator owns two channels: ``snapshots`` (every tick) and
    ``activity_changes`` (only when the in-window flag flips). The report
    status it honours is pushed in by the status manager; the evaluator never
    writes status itself.
    """

    def __init__(
        self,
        window_settings: WindowSettings,
        clock: Clock,
        *,
        report_status: ReportStatus = ReportStatus.NOT_STARTED,
        tracked_day: date | None = None,
    ):
        self.window_settings = window_settings
        self.clock = clock
        self._report_status = ReportStatus(report_status)
        self._tracked_day = tracked_day
        self._active: bool | None = None
        self._ticking = False
        self._snapshot: TimerSnapshot | None = None
        self._snapshots: EventChannel[TimerSnapshot] = EventChannel("timer.snapshot")
        self._activity: EventChannel[bool] = EventChannel("timer.activity")

    @property
    def snapshots(self) -> EventStream[TimerSnapshot]:
        return self._snapshots.view()

    @property
    def activity_changes(self) -> EventStream[bool]:
        return self._activity.view()

    @property
    def snapshot(self) -> TimerSnapshot | None:
        """Most recent snapshot, or ``None`` before the first tick."""
        return self._snapshot

    @property
    def is_active(self) -> bool | None:
        return self._active

    def update_report_status(self, status: ReportStatus) -> None:
        self._report_status = ReportStatus(status)

    def evaluate(self, now: datetime, *, new_day: bool = False) -> TimerSnapshot:
        """Compute a snapshot for ``now`` without touching evaluator state."""
        window = self.window_settings.current
        classification = classify(now, window)

        if self._report_status == ReportStatus.SENT:
            label = TimerLabel.BEFORE_START
            remaining = elapsed(now, next_start(now, window))
            progress = 0.0
        elif classification.phase == WindowPhase.BEFORE_WINDOW:
            label = TimerLabel.BEFORE_START
            remaining = elapsed(now, classification.boundary_start)
            progress = 0.0
        elif classification.phase == WindowPhase.IN_WINDOW:
            label = TimerLabel.TO_END
            remaining = elapsed(now, classification.boundary_end)
            total = elapsed(classification.boundary_start, classification.boundary_end).total_seconds()
            done = elapsed(classification.boundary_start, now).total_seconds()
            progress = min(max(done / total, 0.0), 1.0)
        else:
            label = TimerLabel.BEFORE_START
            remaining = elapsed(now, next_start(now, window))
            progress = 0.0

        if new_day:
            label = TimerLabel.NEW_DAY
            progress = 0.0

        return TimerSnapshot(label=label, remaining=remaining, progress=progress, phase=classification.phase)

    async def tick(self, now: datetime | None = None) -> TimerSnapshot:
        """Advance one tick: detect a new day, recompute, and publish."""
        current = now or self.clock.now()
        today = local_day(current)
        new_day = self._tracked_day is not None and self._tracked_day != today
        if new_day:
            logger.info("timer_new_day", previous_day=str(self._tracked_day), day=str(today))
        self._tracked_day = today

        snapshot = self.evaluate(current, new_day=new_day)
        self._snapshot = snapshot

        active = snapshot.phase == WindowPhase.IN_WINDOW
        flipped = self._active is not None and self._active != active
        self._active = active

        await self._snapshots.publish(snapshot)
        if flipped:
            logger.info("timer_activity_changed", active=active)
            await self._activity.publish(active)
        return snapshot

    async def run_tick(self) -> TimerSnapshot | None:
        """Scheduler entry point; skips a tick while the previous one is running."""
        if self._ticking:
            logger.debug("timer_tick_skipped")
            return None
        self._ticking = True
        try:
            return await self.tick()
        finally:
            self._ticking = False
