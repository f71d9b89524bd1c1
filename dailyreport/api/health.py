"""Health endpoint covering the store, scheduler and delivery channel."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api/v1/health", tags=["health"])


def _get_scheduler_status(request: Request) -> tuple[str, dict[str, str | None]]:
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return "not_initialized", {}
    try:
        status = "running" if scheduler.running else "stopped"
    except Exception:  # noqa: BLE001
        return "unknown", {}

    jobs: dict[str, str | None] = {}
    try:
        for job in scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs[job.id] = next_run.isoformat() if next_run else None
    except Exception:  # noqa: BLE001
        jobs = {}
    return status, jobs


def _get_delivery_status(request: Request) -> str:
    telegram_client = getattr(request.app.state, "telegram_client", None)
    if telegram_client is None:
        return "disabled"
    return f"circuit_{telegram_client.circuit_breaker.state}"


@router.get("")
async def health_check(request: Request) -> dict[str, Any]:
    """Report core dependency health."""
    mongodb_status = "disconnected"
    scheduler_status, scheduler_jobs = _get_scheduler_status(request)

    db = getattr(request.app.state, "mongo_db", None)
    if db is not None:
        try:
            await db.command("ping")
            mongodb_status = "connected"
        except Exception:  # noqa: BLE001
            try:
                await db.list_collection_names()
                mongodb_status = "connected"
            except Exception:  # noqa: BLE001
                mongodb_status = "disconnected"

    lifecycle = getattr(request.app.state, "lifecycle", None)
    report_status = lifecycle.status_manager.status.value if lifecycle is not None else None

    overall = "healthy" if mongodb_status == "connected" else "unhealthy"
    return {
        "status": overall,
        "mongodb": mongodb_status,
        "scheduler": scheduler_status,
        "scheduler_jobs": scheduler_jobs,
        "delivery": _get_delivery_status(request),
        "report_status": report_status,
    }
