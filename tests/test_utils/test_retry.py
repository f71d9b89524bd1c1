"""Tests for retry helpers."""

from __future__ import annotations

import httpx
import pytest

from dailyreport.delivery.telegram import TelegramError
from dailyreport.utils.retry import is_transient_error, retry_async


@pytest.mark.asyncio
async def test_retry_async_retries_transient_error_until_success() -> None:
    state = {"calls": 0}

    async def operation() -> str:
        state["calls"] += 1
        if state["calls"] < 3:
            raise TimeoutError("temporary timeout")
        return "ok"

    result = await retry_async(operation, attempts=3, base_delay_seconds=0)

    assert result == "ok"
    assert state["calls"] == 3


@pytest.mark.asyncio
async def test_retry_async_stops_on_non_transient_error() -> None:
    state = {"calls": 0}

    async def operation() -> str:
        state["calls"] += 1
        raise ValueError("bad input")

    with pytest.raises(ValueError, match="bad input"):
        await retry_async(operation, attempts=3, base_delay_seconds=0)

    assert state["calls"] == 1


@pytest.mark.asyncio
async def test_retry_async_raises_last_error_when_attempts_exhausted() -> None:
    state = {"calls": 0}

    async def operation() -> str:
        state["calls"] += 1
        raise TimeoutError(f"timeout {state['calls']}")

    with pytest.raises(TimeoutError, match="timeout 2"):
        await retry_async(operation, attempts=2, base_delay_seconds=0)


@pytest.mark.asyncio
async def test_retry_async_rejects_non_positive_attempts() -> None:
    async def operation() -> str:
        return "never"

    with pytest.raises(ValueError):
        await retry_async(operation, attempts=0)


def test_is_transient_error_detects_timeout() -> None:
    assert is_transient_error(TimeoutError("timeout"))


def test_is_transient_error_classifies_status_codes() -> None:
    request = httpx.Request("POST", "https://api.telegram.org/botx/sendMessage")

    assert is_transient_error(httpx.ConnectError("refused", request=request))
    assert is_transient_error(TelegramError("Too Many Requests", method="sendMessage", status_code=429))
    assert is_transient_error(TelegramError("Bad Gateway", method="sendMessage", status_code=502))
    assert not is_transient_error(TelegramError("Unauthorized", method="sendMessage", status_code=401))
    assert not is_transient_error(ValueError("nope"))
