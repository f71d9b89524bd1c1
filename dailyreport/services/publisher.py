"""Publish today's report through the delivery pipeline and record the outcome."""

from __future__ import annotations

from datetime import datetime

import structlog

from dailyreport.core.clock import Clock, local_day
from dailyreport.core.status_manager import ReportStatusManager
from dailyreport.delivery.formatter import format_report
from dailyreport.delivery.pipeline import DeliveryPipeline, DeliveryResult, FileExistenceChecker
from dailyreport.errors import PublishInProgressError, ReportLockedError, ReportNotFoundError, ReportStoreError
from dailyreport.models.report import Report, ReportType
from dailyreport.repositories.base import ReportRepository

logger = structlog.get_logger(__name__)


class ReportPublisher:
    """Caller-side half of delivery.

    The pipeline only knows payloads; this class turns a report into a
    payload, guards against two concurrent publishes of the same report, and
    on success marks the report published and asks the status manager to
    recompute.
    """

    def __init__(
        self,
        report_repo: ReportRepository,
        pipeline: DeliveryPipeline,
        status_manager: ReportStatusManager,
        clock: Clock,
        *,
        device_name: str = "Unknown Device",
    ):
        self.report_repo = report_repo
        self.pipeline = pipeline
        self.status_manager = status_manager
        self.clock = clock
        self.device_name = device_name
        self._in_flight: set[str] = set()

    @property
    def file_checker(self) -> FileExistenceChecker:
        return self.pipeline.file_checker

    def is_in_flight(self, report_id: str) -> bool:
        return report_id in self._in_flight

    async def publish_today(
        self,
        now: datetime | None = None,
        report_type: ReportType = ReportType.REGULAR,
    ) -> DeliveryResult:
        current = now or self.clock.now()
        try:
            report = await self.report_repo.fetch_today(local_day(current), report_type)
        except ReportStoreError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise ReportStoreError(f"Failed to load today's report: {exc}") from exc
        if report is None:
            raise ReportNotFoundError(f"No {ReportType(report_type).value} report exists for {local_day(current)}")
        return await self.publish(report, now=current)

    async def publish(self, report: Report, now: datetime | None = None) -> DeliveryResult:
        """Deliver ``report``; at most one delivery per report runs at a time."""
        if report.report_id in self._in_flight:
            raise PublishInProgressError(report.report_id)
        if report.published and not self.status_manager.is_editable(now):
            raise ReportLockedError(f"Report '{report.report_id}' is already published")

        self._in_flight.add(report.report_id)
        try:
            with structlog.contextvars.bound_contextvars(report_id=report.report_id):
                return await self._deliver(report, now)
        finally:
            self._in_flight.discard(report.report_id)

    async def _deliver(self, report: Report, now: datetime | None) -> DeliveryResult:
        has_voice = any(self.file_checker.exists(path) for path in report.voice_note_paths)
        text = format_report(report, device_name=self.device_name, has_voice=has_voice)
        logger.info("report_publish_started", attachments=len(report.voice_note_paths))

        result = await self.pipeline.publish(text, report.voice_note_paths)
        if not result.ok:
            logger.warning(
                "report_publish_failed",
                text_outcome=result.text.outcome.value,
                parts_attempted=result.parts_attempted,
                attachment_outcomes=[part.outcome.value for part in result.attachments],
            )
            return result

        try:
            await self.report_repo.mark_published(report.report_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("report_mark_published_failed", error=str(exc))
            if isinstance(exc, ReportStoreError):
                raise
            raise ReportStoreError(f"Delivered but failed to mark report published: {exc}") from exc

        status = await self.status_manager.record_publish(now)
        logger.info("report_published", status=status.value, attachments_sent=len(result.sent_attachments))
        return result
