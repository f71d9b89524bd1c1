"""Fixtures for API tests backed by a wired lifecycle over mongomock."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from dailyreport.api import reports, settings, status
from dailyreport.core.clock import FixedClock
from dailyreport.core.window import WindowSettings
from dailyreport.lifecycle import ReportLifecycle, build_lifecycle
from dailyreport.models.report import Report
from dailyreport.models.window import WindowConfig
from dailyreport.repositories.mongo import MongoReportRepository, MongoStatusStateRepository


@dataclass
class ApiHarness:
    client: TestClient
    lifecycle: ReportLifecycle
    report_repo: MongoReportRepository
    clock: FixedClock

    def seed(self, report: Report) -> Report:
        asyncio.run(self.report_repo.save(report))
        return report


@pytest.fixture
def build_api(make_sender, make_file_checker):
    """Return a factory for a test app with every report router mounted."""

    def _create(*, sender=None, now: datetime = datetime(2024, 5, 1, 12, 0), files: tuple[str, ...] = ()) -> ApiHarness:
        db = AsyncMongoMockClient()["dailyreport_api_test"]
        report_repo = MongoReportRepository(db)
        clock = FixedClock(now)
        lifecycle = build_lifecycle(
            report_repo=report_repo,
            state_repo=MongoStatusStateRepository(db),
            text_sender=sender or make_sender(),
            attachment_sender=sender or make_sender(),
            clock=clock,
            window_settings=WindowSettings(WindowConfig(start_hour=9, end_hour=18)),
            file_checker=make_file_checker(*files),
            device_name="Test Phone",
        )

        app = FastAPI()
        app.include_router(status.router)
        app.include_router(settings.router)
        app.include_router(reports.router)
        app.state.lifecycle = lifecycle
        app.state.report_repo = report_repo
        return ApiHarness(client=TestClient(app), lifecycle=lifecycle, report_repo=report_repo, clock=clock)

    return _create
