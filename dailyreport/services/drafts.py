"""User actions that create, edit and remove today's report."""

from __future__ import annotations

from datetime import datetime

import structlog

from dailyreport.core.clock import Clock, local_day
from dailyreport.core.status_manager import ReportStatusManager
from dailyreport.errors import ReportLockedError, ReportNotFoundError
from dailyreport.models.report import Report, ReportType, utc_now
from dailyreport.repositories.base import ReportRepository

logger = structlog.get_logger(__name__)


def _clean(items: list[str]) -> list[str]:
    return [item.strip() for item in items if item and item.strip()]


class ReportService:
    """Edit today's report while the status manager says it is editable."""

    def __init__(self, report_repo: ReportRepository, status_manager: ReportStatusManager, clock: Clock):
        self.report_repo = report_repo
        self.status_manager = status_manager
        self.clock = clock

    async def get_today(
        self,
        now: datetime | None = None,
        report_type: ReportType = ReportType.REGULAR,
    ) -> Report | None:
        current = now or self.clock.now()
        return await self.report_repo.fetch_today(local_day(current), report_type)

    async def save_draft(
        self,
        *,
        good_items: list[str],
        bad_items: list[str] | None = None,
        voice_note_paths: list[str] | None = None,
        report_type: ReportType = ReportType.REGULAR,
        now: datetime | None = None,
    ) -> Report:
        """Create or overwrite today's draft; the saved report is unpublished."""
        current = now or self.clock.now()
        await self.status_manager.recompute(current)
        if not self.status_manager.is_editable(current):
            raise ReportLockedError(
                f"Report is not editable while status is '{self.status_manager.status.value}'"
            )

        existing = await self.report_repo.fetch_today(local_day(current), report_type)
        content = {
            "good_items": _clean(good_items),
            "bad_items": _clean(bad_items or []),
            "voice_note_paths": list(voice_note_paths or []),
            "published": False,
            "published_at": None,
            "updated_at": utc_now(),
        }
        if existing is not None:
            report = existing.model_copy(update=content)
        else:
            report = Report(date=current, report_type=report_type, **content)
        await self.report_repo.save(report)
        logger.info("report_draft_saved", report_id=report.report_id, created=existing is None)
        await self.status_manager.recompute(current)
        return report

    async def evaluate(self, results: list[bool], now: datetime | None = None) -> Report:
        """Record per-item evaluation marks on today's custom report."""
        current = now or self.clock.now()
        report = await self.report_repo.fetch_today(local_day(current), ReportType.CUSTOM)
        if report is None:
            raise ReportNotFoundError("No custom report exists for today")
        if len(results) != len(report.good_items):
            raise ValueError("Evaluation must provide one result per planned item")
        report.is_evaluated = True
        report.evaluation_results = list(results)
        report.updated_at = utc_now()
        await self.report_repo.save(report)
        logger.info("report_evaluated", report_id=report.report_id, completed=sum(results))
        return report

    async def delete_today(
        self,
        now: datetime | None = None,
        report_type: ReportType = ReportType.REGULAR,
    ) -> bool:
        current = now or self.clock.now()
        existing = await self.report_repo.fetch_today(local_day(current), report_type)
        if existing is None:
            return False
        deleted = await self.report_repo.delete(existing.report_id)
        logger.info("report_deleted", report_id=existing.report_id, deleted=deleted)
        await self.status_manager.recompute(current)
        return deleted
