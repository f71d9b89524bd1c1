"""Shared request dependencies and error translation for route modules."""

from __future__ import annotations

from fastapi import HTTPException, Request

from dailyreport.errors import (
    PublishInProgressError,
    ReportLockedError,
    ReportNotFoundError,
    ReportStoreError,
    WindowConfigError,
)
from dailyreport.lifecycle import ReportLifecycle
from dailyreport.repositories.base import ReportRepository


def get_lifecycle(request: Request) -> ReportLifecycle:
    """Get the wired report lifecycle from app state."""
    lifecycle = getattr(request.app.state, "lifecycle", None)
    if lifecycle is None:
        raise HTTPException(status_code=503, detail="Report lifecycle is not configured")
    return lifecycle


def get_report_repo(request: Request) -> ReportRepository:
    """Get report repository from app state."""
    repository = getattr(request.app.state, "report_repo", None)
    if repository is None:
        raise HTTPException(status_code=503, detail="Report repository is not configured")
    return repository


_STATUS_CODES: dict[type[Exception], int] = {
    WindowConfigError: 422,
    ReportNotFoundError: 404,
    PublishInProgressError: 409,
    ReportLockedError: 423,
    ReportStoreError: 503,
}


def to_http_error(exc: Exception) -> HTTPException:
    """Translate a lifecycle exception into the matching HTTP error."""
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=500, detail="Internal error")


LIFECYCLE_ERRORS = tuple(_STATUS_CODES)
