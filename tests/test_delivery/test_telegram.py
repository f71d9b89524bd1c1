"""Tests for the Telegram send capabilities."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from dailyreport.delivery.telegram import TelegramClient, TelegramError


def _ok(result: dict | None = None) -> httpx.Response:
    return httpx.Response(200, json={"ok": True, "result": result or {"message_id": 1}})


@pytest.mark.asyncio
async def test_send_text_posts_html_message() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = TelegramClient("bot-token", "42", session=session)
        sent = await client.send_text("<b>Daily report</b>")

    assert sent is True
    assert seen[0].url.path == "/botbot-token/sendMessage"
    body = json.loads(seen[0].content.decode())
    assert body == {
        "chat_id": "42",
        "text": "<b>Daily report</b>",
        "parse_mode": "HTML",
        "disable_web_page_preview": True,
    }


@pytest.mark.asyncio
async def test_send_attachment_uploads_voice_as_multipart(tmp_path: Path) -> None:
    voice = tmp_path / "evening.ogg"
    voice.write_bytes(b"OggS-voice-bytes")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = TelegramClient("bot-token", "42", session=session)
        sent = await client.send_attachment(str(voice))

    assert sent is True
    request = seen[0]
    assert request.url.path == "/botbot-token/sendVoice"
    assert request.headers["content-type"].startswith("multipart/form-data")
    content = request.content
    assert b'name="voice"; filename="evening.ogg"' in content
    assert b"OggS-voice-bytes" in content
    assert b'name="chat_id"' in content


@pytest.mark.asyncio
async def test_missing_chat_id_fails_without_request() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return _ok()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = TelegramClient("bot-token", "  ", session=session)
        sent = await client.send_text("hello")

    assert sent is False
    assert calls == 0


@pytest.mark.asyncio
async def test_api_rejection_returns_false_without_retry() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(400, json={"ok": False, "description": "Bad Request: chat not found"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = TelegramClient("bot-token", "42", session=session, retry_base_delay_seconds=0)
        sent = await client.send_text("hello")

    assert sent is False
    assert calls == 1


@pytest.mark.asyncio
async def test_transient_errors_are_retried_until_success() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls < 3:
            return httpx.Response(502, json={"ok": False, "description": "Bad Gateway"})
        return _ok()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = TelegramClient("bot-token", "42", session=session, retry_base_delay_seconds=0)
        sent = await client.send_text("hello")

    assert sent is True
    assert calls == 3


@pytest.mark.asyncio
async def test_circuit_breaker_opens_after_repeated_failures() -> None:
    calls = 0
    now = 1000.0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("network down", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = TelegramClient(
            "bot-token",
            "42",
            session=session,
            send_attempts=1,
            circuit_breaker_failure_threshold=2,
            circuit_breaker_recovery_seconds=60,
            circuit_time_fn=lambda: now,
        )
        assert await client.send_text("one") is False
        assert await client.send_text("two") is False
        assert client.circuit_breaker.state == "open"
        assert await client.send_text("three") is False
        assert calls == 2

        now += 61
        assert client.circuit_breaker.state == "half_open"
        assert await client.send_text("four") is False
        assert calls == 3
        assert client.circuit_breaker.state == "open"
        assert "network down" in client.circuit_breaker.last_error


@pytest.mark.asyncio
async def test_missing_voice_file_counts_as_failed_send(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _ok()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = TelegramClient("bot-token", "42", session=session)
        sent = await client.send_attachment(str(tmp_path / "missing.ogg"))

    assert sent is False


def test_telegram_error_carries_method_and_status() -> None:
    error = TelegramError("Forbidden", method="sendVoice", status_code=403)

    assert error.method == "sendVoice"
    assert error.status_code == 403
    assert "sendVoice" in str(error)
