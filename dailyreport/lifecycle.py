"""Composition of the report lifecycle components."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from dailyreport.core.clock import Clock
from dailyreport.core.status_manager import ReportStatusManager
from dailyreport.core.timer import TimerEvaluator
from dailyreport.core.window import WindowSettings
from dailyreport.delivery.pipeline import AttachmentSender, DeliveryPipeline, FileExistenceChecker, TextSender
from dailyreport.models.status import StatusChange
from dailyreport.models.window import TimerLabel, TimerSnapshot
from dailyreport.repositories.base import ReportRepository, StatusStateRepository
from dailyreport.services.auto_send import AutoSender
from dailyreport.services.drafts import ReportService
from dailyreport.services.publisher import ReportPublisher

logger = structlog.get_logger(__name__)


@dataclass
class ReportLifecycle:
    """Wired set of components sharing one clock, window and status manager."""

    clock: Clock
    window_settings: WindowSettings
    status_manager: ReportStatusManager
    timer: TimerEvaluator
    pipeline: DeliveryPipeline
    publisher: ReportPublisher
    report_service: ReportService
    auto_sender: AutoSender
    _unsubscribers: list[Callable[[], None]] = field(default_factory=list)

    async def start(self) -> None:
        """Restore persisted state, align the timer and connect the channels."""
        await self.status_manager.load()
        await self.status_manager.recompute()
        self.timer.update_report_status(self.status_manager.status)
        self._unsubscribers = [
            self.timer.activity_changes.subscribe(self._on_activity_change),
            self.timer.snapshots.subscribe(self._on_snapshot),
            self.status_manager.changes.subscribe(self._on_status_change),
        ]
        logger.info(
            "report_lifecycle_started",
            status=self.status_manager.status.value,
            force_unlock=self.status_manager.force_unlock,
        )

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def _on_activity_change(self, active: bool) -> None:
        await self.status_manager.recompute()

    async def _on_snapshot(self, snapshot: TimerSnapshot) -> None:
        if snapshot.label == TimerLabel.NEW_DAY:
            await self.status_manager.recompute()

    def _on_status_change(self, change: StatusChange) -> None:
        self.timer.update_report_status(change.new_status)


def build_lifecycle(
    *,
    report_repo: ReportRepository,
    state_repo: StatusStateRepository,
    text_sender: TextSender,
    attachment_sender: AttachmentSender,
    clock: Clock,
    window_settings: WindowSettings | None = None,
    file_checker: FileExistenceChecker | None = None,
    device_name: str = "Unknown Device",
) -> ReportLifecycle:
    """Construct every component with explicit dependencies."""
    window_settings = window_settings or WindowSettings()
    status_manager = ReportStatusManager(report_repo, state_repo, window_settings, clock)
    timer = TimerEvaluator(window_settings, clock, report_status=status_manager.status)
    pipeline = DeliveryPipeline(text_sender, attachment_sender, file_checker)
    publisher = ReportPublisher(report_repo, pipeline, status_manager, clock, device_name=device_name)
    return ReportLifecycle(
        clock=clock,
        window_settings=window_settings,
        status_manager=status_manager,
        timer=timer,
        pipeline=pipeline,
        publisher=publisher,
        report_service=ReportService(report_repo, status_manager, clock),
        auto_sender=AutoSender(report_repo, publisher, text_sender, clock),
    )
