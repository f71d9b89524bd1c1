"""Classify wall-clock time against the daily report window."""

from __future__ import annotations

from datetime import datetime, timedelta

import structlog
from pydantic import ValidationError

from dailyreport.errors import WindowConfigError
from dailyreport.models.window import WindowClassification, WindowConfig, WindowPhase

logger = structlog.get_logger(__name__)


def _at_hour(moment: datetime, hour: int) -> datetime:
    return moment.replace(hour=hour, minute=0, second=0, microsecond=0)


def classify(now: datetime, window: WindowConfig) -> WindowClassification:
    """Return the phase of ``now`` plus that day's window boundaries.

    The start boundary is inclusive and the end boundary exclusive, so the
    three phases partition the day with no gaps.
    """
    boundary_start = _at_hour(now, window.start_hour)
    boundary_end = _at_hour(now, window.end_hour)
    if now < boundary_start:
        phase = WindowPhase.BEFORE_WINDOW
    elif now < boundary_end:
        phase = WindowPhase.IN_WINDOW
    else:
        phase = WindowPhase.AFTER_WINDOW
    return WindowClassification(phase=phase, boundary_start=boundary_start, boundary_end=boundary_end)


def next_start(now: datetime, window: WindowConfig) -> datetime:
    """Return the next window opening strictly after the current one started."""
    today_start = _at_hour(now, window.start_hour)
    if now < today_start:
        return today_start
    return _at_hour(now + timedelta(days=1), window.start_hour)


def build_window(start_hour: int, end_hour: int) -> WindowConfig:
    """Validate raw hours into a ``WindowConfig`` or raise ``WindowConfigError``."""
    try:
        return WindowConfig(start_hour=start_hour, end_hour=end_hour)
    except ValidationError as exc:
        raise WindowConfigError(f"Invalid report window [{start_hour}, {end_hour}): {exc}") from exc


class WindowSettings:
    """Holder for the window currently in effect.

    Updates are validated before they replace the current value; a rejected
    update leaves the previous window in place.
    """

    def __init__(self, window: WindowConfig | None = None):
        self._window = window or WindowConfig()

    @property
    def current(self) -> WindowConfig:
        return self._window

    def update(self, start_hour: int, end_hour: int) -> WindowConfig:
        try:
            window = build_window(start_hour, end_hour)
        except WindowConfigError:
            logger.warning(
                "window_update_rejected",
                start_hour=start_hour,
                end_hour=end_hour,
                kept_start_hour=self._window.start_hour,
                kept_end_hour=self._window.end_hour,
            )
            raise
        self._window = window
        logger.info("window_updated", start_hour=window.start_hour, end_hour=window.end_hour)
        return window
