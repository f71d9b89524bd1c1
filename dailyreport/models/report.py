"""Daily report entity owned by the report store."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utc_now() -> datetime:
    """Return timezone-aware current UTC timestamp."""
    return datetime.now(timezone.utc)


class ReportType(str, Enum):
    REGULAR = "regular"
    CUSTOM = "custom"
    EXTERNAL = "external"
    CLOUD = "cloud"


class Report(BaseModel):
    """A single day's journal entry plus publication metadata."""

    model_config = ConfigDict(use_enum_values=True)

    report_id: str = Field(default_factory=lambda: str(uuid4()))
    date: datetime
    day: str = ""
    report_type: ReportType = ReportType.REGULAR

    good_items: list[str] = Field(default_factory=list)
    bad_items: list[str] = Field(default_factory=list)
    voice_note_paths: list[str] = Field(default_factory=list)

    # Custom reports only.
    is_evaluated: bool | None = None
    evaluation_results: list[bool] | None = None

    published: bool = False
    published_at: datetime | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    collection_name: ClassVar[str] = "reports"

    @model_validator(mode="after")
    def derive_day(self) -> "Report":
        # Local calendar day the report belongs to; used for "today" lookups.
        # Kept as stored once set, since the store hands back naive UTC dates.
        if not self.day:
            self.day = self.date.date().isoformat()
        return self

    @property
    def is_draft(self) -> bool:
        return not self.published
