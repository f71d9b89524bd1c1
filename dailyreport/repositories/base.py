"""Repository protocol definitions for the data access layer."""

from __future__ import annotations

from datetime import date
from typing import Protocol

from dailyreport.models.report import Report, ReportType
from dailyreport.models.status import StatusState


class ReportRepository(Protocol):
    """Data access contract for daily report entities."""

    async def save(self, report: Report) -> str: ...

    async def get(self, report_id: str) -> Report | None: ...

    async def fetch_today(self, today: date, report_type: ReportType = ReportType.REGULAR) -> Report | None: ...

    async def exists(self, day: date, report_type: ReportType = ReportType.REGULAR) -> bool: ...

    async def mark_published(self, report_id: str) -> None: ...

    async def delete(self, report_id: str) -> bool: ...

    async def list_recent(self, limit: int = 20, report_type: ReportType | None = None) -> list[Report]: ...


class StatusStateRepository(Protocol):
    """Data access contract for the persisted status-manager state."""

    async def load(self) -> StatusState | None: ...

    async def save(self, state: StatusState) -> None: ...
