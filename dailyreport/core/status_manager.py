"""Authoritative report lifecycle state machine."""

from __future__ import annotations

import asyncio
from datetime import date, datetime

import structlog

from dailyreport.core.clock import Clock, local_day
from dailyreport.core.events import EventChannel, EventStream
from dailyreport.core.window import WindowSettings, classify
from dailyreport.errors import ReportStoreError
from dailyreport.models.report import Report
from dailyreport.models.status import ReportStatus, StatusChange, StatusState, migrate_status
from dailyreport.models.window import WindowConfig, WindowPhase
from dailyreport.repositories.base import ReportRepository, StatusStateRepository

logger = structlog.get_logger(__name__)

_EDITABLE_IN_WINDOW = frozenset({ReportStatus.NOT_STARTED, ReportStatus.IN_PROGRESS})


def derive_status(phase: WindowPhase, report: Report | None, *, unlocked: bool = False) -> ReportStatus:
    """Map window phase and today's report onto a status.

    ``unlocked`` means force unlock is holding the day out of ``sent``; the
    report is then treated as re-creatable regardless of phase.
    """
    has_report = report is not None
    published = bool(report and report.published)

    if unlocked:
        return ReportStatus.IN_PROGRESS if has_report and not published else ReportStatus.NOT_STARTED
    if phase == WindowPhase.BEFORE_WINDOW:
        return ReportStatus.NOT_STARTED
    if phase == WindowPhase.IN_WINDOW:
        if not has_report:
            return ReportStatus.NOT_STARTED
        return ReportStatus.SENT if published else ReportStatus.IN_PROGRESS
    if not has_report:
        return ReportStatus.NOT_CREATED
    return ReportStatus.SENT if published else ReportStatus.NOT_SENT


def _parse_day(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


class ReportStatusManager:
    """Sole writer of ``ReportStatus`` and ``ForceUnlock``.

    Every recompute runs under one lock so that reading the clock, detecting
    a rollover and committing the new day cannot interleave with another
    recompute. State is persisted before it becomes visible in memory: if the
    store fails, the previous status stays both persisted and current.

    Force unlock takes the day out of ``sent`` once and keeps it out until the
    report is published again or the day rolls over. The flag itself only
    changes through ``set_force_unlock``.
    """

    def __init__(
        self,
        report_repo: ReportRepository,
        state_repo: StatusStateRepository,
        window_settings: WindowSettings,
        clock: Clock,
    ):
        self.report_repo = report_repo
        self.state_repo = state_repo
        self.window_settings = window_settings
        self.clock = clock
        self._status = ReportStatus.NOT_STARTED
        self._force_unlock = False
        self._current_day: date | None = None
        self._unlocked_day: date | None = None
        self._relocked_day: date | None = None
        self._lock = asyncio.Lock()
        self._changes: EventChannel[StatusChange] = EventChannel("status.change")

    @property
    def status(self) -> ReportStatus:
        return self._status

    @property
    def force_unlock(self) -> bool:
        return self._force_unlock

    @property
    def current_day(self) -> date | None:
        return self._current_day

    @property
    def changes(self) -> EventStream[StatusChange]:
        return self._changes.view()

    async def load(self) -> StatusState | None:
        """Restore persisted state; a stored window replaces the configured one."""
        state = await self._call_store(self.state_repo.load())
        if state is None:
            logger.info("status_state_missing_using_defaults")
            return None
        self._status = migrate_status(state.status)
        self._force_unlock = state.force_unlock
        self._current_day = state.tracked_day
        self._unlocked_day = _parse_day(state.unlocked_day)
        self._relocked_day = _parse_day(state.relocked_day)
        if state.window is not None:
            self.window_settings.update(state.window.start_hour, state.window.end_hour)
        logger.info(
            "status_state_loaded",
            status=self._status.value,
            force_unlock=self._force_unlock,
            current_day=str(self._current_day),
        )
        return state

    async def recompute(self, now: datetime | None = None) -> ReportStatus:
        """Re-evaluate status for ``now`` and commit it if anything changed."""
        async with self._lock:
            return await self._recompute_locked(now or self.clock.now())

    async def record_publish(self, now: datetime | None = None) -> ReportStatus:
        """Recompute after a successful delivery, ending any unlock escape for today."""
        async with self._lock:
            current = now or self.clock.now()
            today = local_day(current)
            if self._unlocked_day == today and self._relocked_day != today:
                await self._commit(
                    status=self._status,
                    force_unlock=self._force_unlock,
                    current_day=self._current_day,
                    unlocked_day=None,
                    relocked_day=today,
                )
            return await self._recompute_locked(current)

    async def set_force_unlock(self, value: bool, now: datetime | None = None) -> ReportStatus:
        """Explicit settings action: the only way ``ForceUnlock`` changes."""
        async with self._lock:
            current = now or self.clock.now()
            await self._commit(
                status=self._status,
                force_unlock=value,
                current_day=self._current_day,
                unlocked_day=self._unlocked_day if value else None,
                relocked_day=None,
            )
            logger.info("force_unlock_changed", force_unlock=value)
            return await self._recompute_locked(current)

    async def set_window(self, start_hour: int, end_hour: int, now: datetime | None = None) -> WindowConfig:
        """Validate and apply a new window, then recompute.

        An invalid window raises ``WindowConfigError`` before anything is
        persisted or recomputed.
        """
        async with self._lock:
            previous = self.window_settings.current
            window = self.window_settings.update(start_hour, end_hour)
            try:
                await self._commit(
                    status=self._status,
                    force_unlock=self._force_unlock,
                    current_day=self._current_day,
                    unlocked_day=self._unlocked_day,
                    relocked_day=self._relocked_day,
                )
            except ReportStoreError:
                self.window_settings.update(previous.start_hour, previous.end_hour)
                raise
            await self._recompute_locked(now or self.clock.now())
            return window

    def phase(self, now: datetime | None = None) -> WindowPhase:
        return classify(now or self.clock.now(), self.window_settings.current).phase

    def is_editable(self, now: datetime | None = None) -> bool:
        """Whether today's report may be created or edited right now."""
        current = now or self.clock.now()
        if self._force_unlock and (
            self._status == ReportStatus.SENT or self._unlocked_day == local_day(current)
        ):
            return True
        return self.phase(current) == WindowPhase.IN_WINDOW and self._status in _EDITABLE_IN_WINDOW

    async def _recompute_locked(self, now: datetime) -> ReportStatus:
        today = local_day(now)
        previous = self._status
        unlocked_day = self._unlocked_day
        relocked_day = self._relocked_day

        if self._current_day != today:
            # Day-scoped signals (sent, unlock escape) belong to the old day.
            logger.info("status_new_day", previous_day=str(self._current_day), day=str(today))
            previous = ReportStatus.NOT_STARTED
            unlocked_day = None
            relocked_day = None

        report = await self._call_store(self.report_repo.fetch_today(today))

        unlocked = False
        if (
            self._force_unlock
            and relocked_day != today
            and (previous == ReportStatus.SENT or unlocked_day == today)
        ):
            unlocked = True
            unlocked_day = today

        phase = classify(now, self.window_settings.current).phase
        status = derive_status(phase, report, unlocked=unlocked)

        if (
            status != self._status
            or today != self._current_day
            or unlocked_day != self._unlocked_day
            or relocked_day != self._relocked_day
        ):
            await self._commit(
                status=status,
                force_unlock=self._force_unlock,
                current_day=today,
                unlocked_day=unlocked_day,
                relocked_day=relocked_day,
            )
        return status

    async def _commit(
        self,
        *,
        status: ReportStatus,
        force_unlock: bool,
        current_day: date | None,
        unlocked_day: date | None,
        relocked_day: date | None,
    ) -> None:
        state = StatusState(
            status=status,
            force_unlock=force_unlock,
            current_day=current_day.isoformat() if current_day else None,
            unlocked_day=unlocked_day.isoformat() if unlocked_day else None,
            relocked_day=relocked_day.isoformat() if relocked_day else None,
            window=self.window_settings.current,
        )
        await self._call_store(self.state_repo.save(state))

        previous_status = self._status
        changed = status != previous_status or force_unlock != self._force_unlock
        self._status = status
        self._force_unlock = force_unlock
        self._current_day = current_day
        self._unlocked_day = unlocked_day
        self._relocked_day = relocked_day

        if changed:
            logger.info(
                "report_status_changed",
                previous_status=previous_status.value,
                status=status.value,
                force_unlock=force_unlock,
            )
            await self._changes.publish(
                StatusChange(new_status=status, force_unlock=force_unlock, previous_status=previous_status)
            )

    @staticmethod
    async def _call_store(awaitable):  # noqa: ANN001, ANN205
        try:
            return await awaitable
        except ReportStoreError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise ReportStoreError(f"Report store operation failed: {exc}") from exc
