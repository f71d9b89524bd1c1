"""Injectable time sources."""

from __future__ import annotations

import os
from datetime import date, datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_LOCALTIME = Path("/etc/localtime")


class Clock(Protocol):
    """Source of the current local wall-clock time."""

    def now(self) -> datetime: ...


def resolve_timezone(name: str | None = None) -> tzinfo:
    """Return the IANA zone for ``name``, or the host's zone when unset.

    Falls back to the host's current fixed offset only when no zone name can
    be found.
    """
    if name:
        return ZoneInfo(name)

    env_name = os.environ.get("TZ", "").lstrip(":")
    if env_name:
        try:
            return ZoneInfo(env_name)
        except (ZoneInfoNotFoundError, ValueError):
            pass

    if _LOCALTIME.is_symlink():
        target = str(_LOCALTIME.resolve())
        marker = "zoneinfo/"
        if marker in target:
            try:
                return ZoneInfo(target.split(marker, 1)[1])
            except (ZoneInfoNotFoundError, ValueError):
                pass

    return datetime.now().astimezone().tzinfo or timezone.utc


class SystemClock:
    """Clock backed by a local IANA timezone."""

    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz or resolve_timezone()

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """Manually driven clock for deterministic tests and replays."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current


def local_day(moment: datetime) -> date:
    """Return the calendar day ``moment`` falls on (its own timezone)."""
    return moment.date()


def elapsed(start: datetime, end: datetime) -> timedelta:
    """Real time from ``start`` to ``end``; aware values are compared in UTC."""
    if start.tzinfo is not None and end.tzinfo is not None:
        return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
    return end - start
