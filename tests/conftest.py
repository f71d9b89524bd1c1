"""Shared test fixtures for dailyreport."""

from __future__ import annotations

from datetime import datetime

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from dailyreport.core.clock import FixedClock
from dailyreport.core.status_manager import ReportStatusManager
from dailyreport.core.window import WindowSettings
from dailyreport.models.report import Report, ReportType
from dailyreport.models.window import WindowConfig
from dailyreport.repositories.mongo import MongoReportRepository, MongoStatusStateRepository, ensure_indexes


class RecordingSender:
    """Send capability double that records calls and answers from a script."""

    def __init__(self, *, text_ok: bool = True, attachment_results: dict[str, bool | Exception] | None = None):
        self.text_ok = text_ok
        self.attachment_results = attachment_results or {}
        self.texts: list[str] = []
        self.attachments: list[str] = []

    async def send_text(self, body: str) -> bool:
        self.texts.append(body)
        return self.text_ok

    async def send_attachment(self, path: str) -> bool:
        self.attachments.append(path)
        result = self.attachment_results.get(path, True)
        if isinstance(result, Exception):
            raise result
        return result


class StaticFileChecker:
    """File existence checker backed by an explicit set of paths."""

    def __init__(self, existing: set[str] | None = None):
        self.existing = existing or set()

    def exists(self, path: str) -> bool:
        return path in self.existing


@pytest.fixture
def mongo_client() -> AsyncMongoMockClient:
    """Return an isolated async Mongo mock client per test."""
    return AsyncMongoMockClient()


@pytest_asyncio.fixture
async def mongo_db(mongo_client: AsyncMongoMockClient):
    """Return indexed test database instance."""
    db = mongo_client["dailyreport_test"]
    await ensure_indexes(db)
    return db


@pytest.fixture
def report_repo(mongo_db):
    """Mongo report repository fixture."""
    return MongoReportRepository(mongo_db)


@pytest.fixture
def state_repo(mongo_db):
    """Mongo status-state repository fixture."""
    return MongoStatusStateRepository(mongo_db)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to midday inside the default 09-18 test window."""
    return FixedClock(datetime(2024, 5, 1, 12, 0, 0))


@pytest.fixture
def window_settings() -> WindowSettings:
    return WindowSettings(WindowConfig(start_hour=9, end_hour=18))


@pytest.fixture
def status_manager(report_repo, state_repo, window_settings, clock) -> ReportStatusManager:
    return ReportStatusManager(report_repo, state_repo, window_settings, clock)


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def make_sender():
    """Factory for scripted send capabilities."""
    return RecordingSender


@pytest.fixture
def make_file_checker():
    """Factory for file existence checkers over a fixed set of paths."""

    def _create(*paths: str) -> StaticFileChecker:
        return StaticFileChecker(set(paths))

    return _create


@pytest.fixture
def create_test_report():
    """Factory for quickly creating Report fixtures."""

    def _create(
        *,
        date: datetime = datetime(2024, 5, 1, 10, 30),
        good_items: list[str] | None = None,
        bad_items: list[str] | None = None,
        voice_note_paths: list[str] | None = None,
        published: bool = False,
        report_type: ReportType = ReportType.REGULAR,
    ) -> Report:
        return Report(
            date=date,
            good_items=["Shipped the release"] if good_items is None else good_items,
            bad_items=["Skipped the gym"] if bad_items is None else bad_items,
            voice_note_paths=voice_note_paths or [],
            published=published,
            report_type=report_type,
        )

    return _create
