"""Report lifecycle status models."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from dailyreport.models.window import WindowConfig


def utc_now() -> datetime:
    """Return timezone-aware current UTC timestamp."""
    return datetime.now(timezone.utc)


class ReportStatus(str, Enum):
    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    NOT_CREATED = "notCreated"
    NOT_SENT = "notSent"
    SENT = "sent"


# Older clients persisted a terminal "done" status before "sent" existed.
_LEGACY_STATUS_ALIASES = {"done": ReportStatus.SENT}


def migrate_status(raw: str | None) -> ReportStatus:
    """Map a persisted status value onto the current enumeration."""
    if raw is None:
        return ReportStatus.NOT_STARTED
    if raw in _LEGACY_STATUS_ALIASES:
        return _LEGACY_STATUS_ALIASES[raw]
    try:
        return ReportStatus(raw)
    except ValueError:
        return ReportStatus.NOT_STARTED


class StatusState(BaseModel):
    """Persisted status-manager state: the fields that survive a restart."""

    model_config = ConfigDict(use_enum_values=True)

    status: ReportStatus = ReportStatus.NOT_STARTED
    force_unlock: bool = False
    current_day: str | None = None
    # Day on which force unlock took the report out of ``sent``.
    unlocked_day: str | None = None
    # Day on which a publish ended that escape again.
    relocked_day: str | None = None
    window: WindowConfig | None = None
    updated_at: datetime = Field(default_factory=utc_now)

    collection_name: ClassVar[str] = "status_state"

    @property
    def tracked_day(self) -> date | None:
        return date.fromisoformat(self.current_day) if self.current_day else None


class StatusChange(BaseModel):
    """Broadcast payload emitted whenever the status manager commits a change."""

    model_config = ConfigDict(frozen=True)

    new_status: ReportStatus
    force_unlock: bool
    previous_status: ReportStatus | None = None
