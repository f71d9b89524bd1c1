"""Telegram Bot API adapter implementing the text and attachment send capabilities."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx

from dailyreport.utils.circuit_breaker import CircuitBreaker
from dailyreport.utils.retry import retry_async

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramError(RuntimeError):
    """Raised when the Bot API rejects a call or answers with a non-success status."""

    def __init__(self, message: str, *, method: str, status_code: int | None = None):
        super().__init__(f"Telegram {method} failed: {message}")
        self.method = method
        self.status_code = status_code


class TelegramClient:
    """Send report text and voice notes to one chat.

    Both send methods return ``False`` instead of raising: transport errors,
    API rejections and an open circuit breaker all count as a failed send.
    Transient errors are retried here, inside the capability.
    """

    def __init__(
        self,
        token: str,
        chat_id: str | None,
        *,
        timeout_seconds: float = 15.0,
        send_attempts: int = 3,
        retry_base_delay_seconds: float = 0.5,
        circuit_breaker_failure_threshold: int = 3,
        circuit_breaker_recovery_seconds: int = 120,
        circuit_time_fn: Callable[[], float] | None = None,
        api_base: str = TELEGRAM_API_BASE,
        session: httpx.AsyncClient | None = None,
    ):
        self.token = token
        self.chat_id = (chat_id or "").strip()
        self.send_attempts = send_attempts
        self.retry_base_delay_seconds = retry_base_delay_seconds
        self.api_base = api_base.rstrip("/")
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=circuit_breaker_failure_threshold,
            recovery_seconds=float(circuit_breaker_recovery_seconds),
            time_fn=circuit_time_fn or time.monotonic,
        )
        self.session = session or httpx.AsyncClient(timeout=float(timeout_seconds))

    async def send_text(self, body: str) -> bool:
        """Send an HTML-formatted message."""
        payload = {
            "chat_id": self.chat_id,
            "text": body,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        return await self._send("sendMessage", lambda: self._call("sendMessage", json=payload))

    async def send_attachment(self, path: str) -> bool:
        """Upload a recorded voice note from ``path``."""
        file_path = Path(path)

        async def _upload() -> dict[str, Any]:
            content = await asyncio.to_thread(file_path.read_bytes)
            return await self._call(
                "sendVoice",
                data={"chat_id": self.chat_id, "caption": "", "parse_mode": "HTML"},
                files={"voice": (file_path.name, content)},
            )

        return await self._send("sendVoice", _upload)

    async def close(self) -> None:
        """Close underlying HTTP client."""
        await self.session.aclose()

    async def _send(self, method: str, operation: Callable[[], Awaitable[dict[str, Any]]]) -> bool:
        if not self.chat_id:
            logger.error("Telegram chat id is not configured; cannot call %s", method)
            return False

        if self.circuit_breaker.is_open():
            logger.warning(
                "Telegram circuit breaker open; skipping request: method=%s retry_in=%.1fs last_error=%s",
                method,
                self.circuit_breaker.seconds_until_close(),
                self.circuit_breaker.last_error,
            )
            return False

        try:
            await retry_async(
                operation,
                attempts=self.send_attempts,
                base_delay_seconds=self.retry_base_delay_seconds,
                label=f"telegram.{method}",
            )
        except Exception as exc:  # noqa: BLE001
            self.circuit_breaker.record_failure(str(exc))
            logger.error("Telegram send failed: method=%s error=%s", method, exc)
            return False

        self.circuit_breaker.record_success()
        logger.info("Telegram send succeeded: method=%s", method)
        return True

    async def _call(self, method: str, **kwargs: Any) -> dict[str, Any]:
        response = await self.session.post(f"{self.api_base}/bot{self.token}/{method}", **kwargs)
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.status_code >= 400 or not payload.get("ok", False):
            description = payload.get("description") or f"HTTP {response.status_code}"
            raise TelegramError(description, method=method, status_code=response.status_code)
        return payload
