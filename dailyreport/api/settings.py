"""Settings actions: report window and force unlock."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dailyreport.api.deps import LIFECYCLE_ERRORS, get_lifecycle, to_http_error
from dailyreport.lifecycle import ReportLifecycle
from dailyreport.models.status import ReportStatus

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


class WindowUpdateRequest(BaseModel):
    """Requested window hours; validated by the window settings, not here."""

    start_hour: int
    end_hour: int


class WindowUpdateResponse(BaseModel):
    start_hour: int
    end_hour: int
    status: ReportStatus


class ForceUnlockRequest(BaseModel):
    enabled: bool


class ForceUnlockResponse(BaseModel):
    force_unlock: bool
    status: ReportStatus
    editable: bool


@router.put("/window", response_model=WindowUpdateResponse)
async def update_window(
    payload: WindowUpdateRequest,
    lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)],
) -> WindowUpdateResponse:
    """Replace the daily window and recompute status under it."""
    try:
        window = await lifecycle.status_manager.set_window(payload.start_hour, payload.end_hour)
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc
    return WindowUpdateResponse(
        start_hour=window.start_hour,
        end_hour=window.end_hour,
        status=lifecycle.status_manager.status,
    )


@router.put("/force-unlock", response_model=ForceUnlockResponse)
async def update_force_unlock(
    payload: ForceUnlockRequest,
    lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)],
) -> ForceUnlockResponse:
    """Toggle force unlock; the only action that changes the stored flag."""
    manager = lifecycle.status_manager
    try:
        status = await manager.set_force_unlock(payload.enabled)
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc
    return ForceUnlockResponse(
        force_unlock=manager.force_unlock,
        status=status,
        editable=manager.is_editable(),
    )
