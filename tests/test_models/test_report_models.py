"""Tests for report, status and window models."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from dailyreport.models.report import Report, ReportType
from dailyreport.models.status import ReportStatus, StatusState, migrate_status
from dailyreport.models.window import WindowConfig, format_remaining


def test_report_defaults_and_derived_day() -> None:
    report = Report(date=datetime(2024, 5, 1, 23, 45), good_items=["Reviewed PRs"])

    assert report.report_id
    assert report.day == "2024-05-01"
    assert report.report_type == ReportType.REGULAR.value
    assert report.bad_items == []
    assert report.is_draft is True
    assert report.published_at is None


def test_report_keeps_explicit_day() -> None:
    report = Report(date=datetime(2024, 5, 1, 22, 0), day="2024-05-02")

    assert report.day == "2024-05-02"


def test_report_enum_serialization_uses_strings() -> None:
    report = Report(date=datetime(2024, 5, 1, 9, 0), report_type=ReportType.CUSTOM)
    payload = report.model_dump(mode="json")

    assert payload["report_type"] == "custom"
    assert payload["day"] == "2024-05-01"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, ReportStatus.NOT_STARTED),
        ("done", ReportStatus.SENT),
        ("sent", ReportStatus.SENT),
        ("notSent", ReportStatus.NOT_SENT),
        ("inProgress", ReportStatus.IN_PROGRESS),
        ("archived", ReportStatus.NOT_STARTED),
    ],
)
def test_migrate_status_maps_legacy_and_unknown_values(raw: str | None, expected: ReportStatus) -> None:
    assert migrate_status(raw) == expected


def test_status_state_defaults() -> None:
    state = StatusState()

    assert state.status == ReportStatus.NOT_STARTED.value
    assert state.force_unlock is False
    assert state.tracked_day is None
    assert state.window is None


def test_status_state_tracked_day_parses_iso_date() -> None:
    assert StatusState(current_day="2024-05-01").tracked_day == date(2024, 5, 1)


@pytest.mark.parametrize(("start", "end"), [(9, 9), (18, 9), (-1, 9), (9, 24)])
def test_window_config_rejects_invalid_hours(start: int, end: int) -> None:
    with pytest.raises(ValidationError):
        WindowConfig(start_hour=start, end_hour=end)


def test_window_config_is_immutable() -> None:
    window = WindowConfig(start_hour=9, end_hour=18)

    with pytest.raises(ValidationError):
        window.start_hour = 10  # type: ignore[misc]


@pytest.mark.parametrize(
    ("remaining", "expected"),
    [
        (timedelta(0), "00:00:00"),
        (timedelta(seconds=59.9), "00:00:59"),
        (timedelta(hours=2, minutes=3, seconds=4), "02:03:04"),
        (timedelta(hours=25), "25:00:00"),
        (timedelta(seconds=-5), "00:00:00"),
    ],
)
def test_format_remaining(remaining: timedelta, expected: str) -> None:
    assert format_remaining(remaining) == expected
