"""Daily report window and countdown models."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WindowPhase(str, Enum):
    BEFORE_WINDOW = "beforeWindow"
    IN_WINDOW = "inWindow"
    AFTER_WINDOW = "afterWindow"


class TimerLabel(str, Enum):
    BEFORE_START = "beforeStart"
    TO_END = "toEnd"
    NEW_DAY = "newDay"


class WindowConfig(BaseModel):
    """Daily ``[start_hour, end_hour)`` interval in local wall-clock hours."""

    model_config = ConfigDict(frozen=True)

    start_hour: int = Field(default=8, ge=0, le=23)
    end_hour: int = Field(default=22, ge=0, le=23)

    @model_validator(mode="after")
    def validate_order(self) -> "WindowConfig":
        if self.start_hour == self.end_hour:
            raise ValueError("start_hour and end_hour must differ")
        if self.start_hour > self.end_hour:
            raise ValueError("start_hour must be earlier than end_hour")
        return self


class WindowClassification(BaseModel):
    """Position of a timestamp relative to that day's window."""

    model_config = ConfigDict(frozen=True)

    phase: WindowPhase
    boundary_start: datetime
    boundary_end: datetime

    @property
    def is_active(self) -> bool:
        return self.phase == WindowPhase.IN_WINDOW


class TimerSnapshot(BaseModel):
    """Countdown state recomputed on every tick. Never persisted."""

    model_config = ConfigDict(frozen=True)

    label: TimerLabel
    remaining: timedelta
    progress: float = Field(ge=0.0, le=1.0)
    phase: WindowPhase

    @property
    def remaining_text(self) -> str:
        return format_remaining(self.remaining)


def format_remaining(remaining: timedelta) -> str:
    """Render a duration as ``HH:MM:SS``; negative durations clamp to zero."""
    total = max(int(remaining.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
