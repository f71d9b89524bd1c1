"""Exception types raised across the report lifecycle core."""

from __future__ import annotations


class WindowConfigError(ValueError):
    """Raised when a daily window is rejected at the configuration boundary."""


class ReportStoreError(RuntimeError):
    """Raised when the report store (or status-state store) cannot be read or written."""


class ReportNotFoundError(LookupError):
    """Raised when an operation needs today's report and none exists."""


class ReportLockedError(RuntimeError):
    """Raised when a report edit is attempted while the report is not editable."""


class PublishInProgressError(RuntimeError):
    """Raised when a second publish is requested for a report already in flight."""

    def __init__(self, report_id: str):
        super().__init__(f"Publish already in progress for report '{report_id}'")
        self.report_id = report_id


__all__ = [
    "PublishInProgressError",
    "ReportLockedError",
    "ReportNotFoundError",
    "ReportStoreError",
    "WindowConfigError",
]
