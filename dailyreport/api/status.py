"""Read-only views of the report status and countdown timer."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dailyreport.api.deps import get_lifecycle
from dailyreport.lifecycle import ReportLifecycle
from dailyreport.models.status import ReportStatus
from dailyreport.models.window import TimerLabel, WindowConfig, WindowPhase

router = APIRouter(prefix="/api/v1", tags=["status"])


class StatusResponse(BaseModel):
    """Current lifecycle state as seen by the status manager."""

    status: ReportStatus
    force_unlock: bool
    editable: bool
    phase: WindowPhase
    current_day: str | None = None
    window: WindowConfig


class TimerResponse(BaseModel):
    """Latest countdown snapshot."""

    label: TimerLabel
    remaining_seconds: int
    remaining_text: str
    progress: float
    phase: WindowPhase


@router.get("/status", response_model=StatusResponse)
async def get_status(lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)]) -> StatusResponse:
    """Return the status last committed by the status manager."""
    manager = lifecycle.status_manager
    now = lifecycle.clock.now()
    return StatusResponse(
        status=manager.status,
        force_unlock=manager.force_unlock,
        editable=manager.is_editable(now),
        phase=manager.phase(now),
        current_day=manager.current_day.isoformat() if manager.current_day else None,
        window=lifecycle.window_settings.current,
    )


@router.get("/timer", response_model=TimerResponse)
async def get_timer(lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)]) -> TimerResponse:
    """Return the most recent tick, or a fresh evaluation before the first tick."""
    snapshot = lifecycle.timer.snapshot or lifecycle.timer.evaluate(lifecycle.clock.now())
    return TimerResponse(
        label=snapshot.label,
        remaining_seconds=max(int(snapshot.remaining.total_seconds()), 0),
        remaining_text=snapshot.remaining_text,
        progress=round(snapshot.progress, 4),
        phase=snapshot.phase,
    )
