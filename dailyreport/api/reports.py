"""API endpoints for today's report: drafting, publishing and history."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from dailyreport.api.deps import LIFECYCLE_ERRORS, get_lifecycle, get_report_repo, to_http_error
from dailyreport.delivery.pipeline import PartOutcome
from dailyreport.lifecycle import ReportLifecycle
from dailyreport.models.report import Report, ReportType
from dailyreport.models.status import ReportStatus
from dailyreport.repositories.base import ReportRepository

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


class ReportListResponse(BaseModel):
    """List response for recent reports."""

    items: list[Report]
    total: int


class DraftRequest(BaseModel):
    """Content for today's draft; blank items are dropped on save."""

    good_items: list[str] = Field(default_factory=list)
    bad_items: list[str] = Field(default_factory=list)
    voice_note_paths: list[str] = Field(default_factory=list)
    report_type: ReportType = ReportType.REGULAR


class EvaluationRequest(BaseModel):
    results: list[bool]


class DeliveryPartResponse(BaseModel):
    kind: str
    target: str
    outcome: PartOutcome
    error: str | None = None


class PublishResponse(BaseModel):
    """Aggregate delivery verdict plus the per-part breakdown."""

    ok: bool
    status: ReportStatus
    text: DeliveryPartResponse
    attachments: list[DeliveryPartResponse]


@router.get("", response_model=ReportListResponse)
async def list_reports(
    report_repo: Annotated[ReportRepository, Depends(get_report_repo)],
    limit: int = Query(default=20, ge=1, le=100),
    report_type: ReportType | None = Query(default=None),
) -> ReportListResponse:
    """Return recent reports, newest day first."""
    try:
        items = await report_repo.list_recent(limit=limit, report_type=report_type)
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc
    return ReportListResponse(items=items, total=len(items))


@router.get("/today", response_model=Report)
async def get_today_report(
    lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)],
    report_type: ReportType = Query(default=ReportType.REGULAR),
) -> Report:
    """Return today's report of the requested type."""
    try:
        report = await lifecycle.report_service.get_today(report_type=report_type)
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc
    if report is None:
        raise HTTPException(status_code=404, detail="No report exists for today")
    return report


@router.put("/today", response_model=Report)
async def save_today_report(
    payload: DraftRequest,
    lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)],
) -> Report:
    """Create or overwrite today's draft while it is editable."""
    try:
        return await lifecycle.report_service.save_draft(
            good_items=payload.good_items,
            bad_items=payload.bad_items,
            voice_note_paths=payload.voice_note_paths,
            report_type=payload.report_type,
        )
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc


@router.delete("/today", status_code=204)
async def delete_today_report(
    lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)],
    report_type: ReportType = Query(default=ReportType.REGULAR),
) -> Response:
    try:
        deleted = await lifecycle.report_service.delete_today(report_type=report_type)
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail="No report exists for today")
    return Response(status_code=204)


@router.post("/today/publish", response_model=PublishResponse)
async def publish_today_report(
    lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)],
    report_type: ReportType = Query(default=ReportType.REGULAR),
) -> PublishResponse:
    """Deliver today's report; a failed delivery is reported in the body, not as an error."""
    try:
        result = await lifecycle.publisher.publish_today(report_type=report_type)
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc
    return PublishResponse(
        ok=result.ok,
        status=lifecycle.status_manager.status,
        text=DeliveryPartResponse(**vars(result.text)),
        attachments=[DeliveryPartResponse(**vars(part)) for part in result.attachments],
    )


@router.post("/today/evaluate", response_model=Report)
async def evaluate_today_plan(
    payload: EvaluationRequest,
    lifecycle: Annotated[ReportLifecycle, Depends(get_lifecycle)],
) -> Report:
    """Record completion marks for today's custom report."""
    try:
        return await lifecycle.report_service.evaluate(payload.results)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except LIFECYCLE_ERRORS as exc:
        raise to_http_error(exc) from exc
