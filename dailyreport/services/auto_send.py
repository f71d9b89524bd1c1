"""Scheduled end-of-day delivery of unpublished reports."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

import structlog

from dailyreport.core.clock import Clock, local_day
from dailyreport.delivery.formatter import NO_REPORT_TEXT
from dailyreport.delivery.pipeline import TextSender
from dailyreport.errors import PublishInProgressError
from dailyreport.models.report import Report, ReportType
from dailyreport.repositories.base import ReportRepository
from dailyreport.services.publisher import ReportPublisher

logger = structlog.get_logger(__name__)

AutoSendOutcome = Literal[
    "published",
    "failed",
    "already_published",
    "empty",
    "no_report_notice",
    "skipped",
]

AUTO_SEND_TYPES = (ReportType.REGULAR, ReportType.CUSTOM)


class AutoSender:
    """Publish today's report and plan at the configured time if the user has not.

    Each report type is handled on its own: a published report is left alone,
    a report with no "good" items is not sent, anything else is published.
    The "no report" notice goes out only when neither type exists today.
    """

    def __init__(
        self,
        report_repo: ReportRepository,
        publisher: ReportPublisher,
        text_sender: TextSender,
        clock: Clock,
    ):
        self.report_repo = report_repo
        self.publisher = publisher
        self.text_sender = text_sender
        self.clock = clock
        self.last_outcome: AutoSendOutcome | None = None
        self.last_results: dict[str, AutoSendOutcome] = {}

    async def run(self) -> AutoSendOutcome:
        now = self.clock.now()
        today = local_day(now)
        reports = {
            report_type.value: await self.report_repo.fetch_today(today, report_type)
            for report_type in AUTO_SEND_TYPES
        }

        results: dict[str, AutoSendOutcome] = {}
        if all(report is None for report in reports.values()):
            sent = await self.text_sender.send_text(NO_REPORT_TEXT)
            outcome: AutoSendOutcome = "no_report_notice" if sent else "failed"
        else:
            for report_type, report in reports.items():
                if report is not None:
                    results[report_type] = await self._send_one(report, now)
            outcome = _overall(list(results.values()))

        self.last_outcome = outcome
        self.last_results = results
        logger.info("auto_send_finished", outcome=outcome, results=results, day=str(today))
        return outcome

    async def _send_one(self, report: Report, now: datetime) -> AutoSendOutcome:
        if report.published:
            return "already_published"
        if not report.good_items:
            return "empty"
        try:
            result = await self.publisher.publish(report, now=now)
        except PublishInProgressError:
            return "skipped"
        return "published" if result.ok else "failed"


def _overall(results: list[AutoSendOutcome]) -> AutoSendOutcome:
    for outcome in ("failed", "published", "skipped", "already_published"):
        if outcome in results:
            return outcome
    return "empty"
