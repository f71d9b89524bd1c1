"""API tests for the status and timer views."""

from __future__ import annotations

import asyncio
from datetime import datetime

from fastapi import FastAPI
from fastapi.testclient import TestClient

from dailyreport.api.status import router
from dailyreport.models.report import Report


def test_status_reports_in_window_defaults(build_api) -> None:
    api = build_api()

    response = api.client.get("/api/v1/status")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "notStarted"
    assert payload["force_unlock"] is False
    assert payload["editable"] is True
    assert payload["phase"] == "inWindow"
    assert payload["window"] == {"start_hour": 9, "end_hour": 18}


def test_status_reflects_committed_recompute(build_api) -> None:
    api = build_api(now=datetime(2024, 5, 1, 19, 0))
    api.seed(Report(date=datetime(2024, 5, 1, 10, 0), good_items=["Demo"]))
    asyncio.run(api.lifecycle.status_manager.recompute())

    payload = api.client.get("/api/v1/status").json()

    assert payload["status"] == "notSent"
    assert payload["editable"] is False
    assert payload["phase"] == "afterWindow"
    assert payload["current_day"] == "2024-05-01"


def test_timer_evaluates_before_first_tick(build_api) -> None:
    api = build_api()

    payload = api.client.get("/api/v1/timer").json()

    assert payload["label"] == "toEnd"
    assert payload["remaining_seconds"] == 6 * 3600
    assert payload["remaining_text"] == "06:00:00"
    assert payload["progress"] == 0.3333
    assert payload["phase"] == "inWindow"


def test_timer_returns_last_tick_snapshot(build_api) -> None:
    api = build_api(now=datetime(2024, 5, 1, 8, 30))
    asyncio.run(api.lifecycle.timer.tick())
    api.clock.set(datetime(2024, 5, 1, 12, 0))

    payload = api.client.get("/api/v1/timer").json()

    assert payload["label"] == "beforeStart"
    assert payload["remaining_text"] == "00:30:00"
    assert payload["progress"] == 0.0


def test_status_is_unavailable_without_lifecycle() -> None:
    app = FastAPI()
    app.include_router(router)
    client = TestClient(app)

    response = client.get("/api/v1/status")

    assert response.status_code == 503
