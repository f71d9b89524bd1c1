"""Retry helpers for transient failures of outbound send capabilities."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

T = TypeVar("T")

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


def _status_code(error: Exception) -> int | None:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    code = getattr(error, "status_code", None)
    return code if isinstance(code, int) else None


def is_transient_error(error: Exception) -> bool:
    """Return True when an exception likely represents a retriable transient error."""
    if isinstance(error, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException, httpx.TransportError)):
        return True
    return _status_code(error) in TRANSIENT_STATUS_CODES


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    base_delay_seconds: float = 0.5,
    should_retry: Callable[[Exception], bool] = is_transient_error,
    label: str = "operation",
) -> T:
    """Retry an async operation with exponential backoff."""
    if attempts <= 0:
        raise ValueError("attempts must be > 0")

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as error:  # noqa: BLE001
            if attempt >= attempts or not should_retry(error):
                raise
            delay = base_delay_seconds * (2 ** (attempt - 1))
            logger.info("Retrying %s after transient error: attempt=%s delay=%.2fs error=%s", label, attempt, delay, error)
            await asyncio.sleep(delay)

    raise RuntimeError("retry_async exhausted unexpectedly")
