"""Shared data models for dailyreport."""

from dailyreport.models.report import Report, ReportType
from dailyreport.models.status import ReportStatus, StatusChange, StatusState, migrate_status
from dailyreport.models.window import (
    TimerLabel,
    TimerSnapshot,
    WindowClassification,
    WindowConfig,
    WindowPhase,
    format_remaining,
)

__all__ = [
    "Report",
    "ReportStatus",
    "ReportType",
    "StatusChange",
    "StatusState",
    "TimerLabel",
    "TimerSnapshot",
    "WindowClassification",
    "WindowConfig",
    "WindowPhase",
    "format_remaining",
    "migrate_status",
]
