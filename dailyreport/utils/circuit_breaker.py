"""Circuit breaker for the outbound messaging endpoint."""

from __future__ import annotations

import time
from typing import Callable, Literal

BreakerState = Literal["closed", "open", "half_open"]


class CircuitBreaker:
    """Stop calling an endpoint after consecutive failures.

    Once the recovery period passes the breaker goes half-open and lets a
    single trial call through: success closes it, failure re-opens it for
    another full period without waiting for the threshold again.
    """

    def __init__(
        self,
        *,
        failure_threshold: int = 3,
        recovery_seconds: float = 120.0,
        time_fn: Callable[[], float] | None = None,
    ):
        if failure_threshold <= 0:
            raise ValueError("failure_threshold must be > 0")
        if recovery_seconds <= 0:
            raise ValueError("recovery_seconds must be > 0")

        self.failure_threshold = failure_threshold
        self.recovery_seconds = recovery_seconds
        self._now = time_fn or time.monotonic
        self._failures = 0
        self._retry_at: float | None = None
        self.last_error: str | None = None

    @property
    def state(self) -> BreakerState:
        if self._retry_at is None:
            return "closed"
        return "open" if self._now() < self._retry_at else "half_open"

    @property
    def consecutive_failures(self) -> int:
        return self._failures

    def is_open(self) -> bool:
        """True while calls must be skipped; a half-open breaker admits a trial call."""
        return self.state == "open"

    def record_success(self) -> None:
        self._failures = 0
        self._retry_at = None
        self.last_error = None

    def record_failure(self, error: str | None = None) -> None:
        trial_failed = self.state == "half_open"
        self._failures += 1
        self.last_error = error
        if trial_failed or self._failures >= self.failure_threshold:
            self._retry_at = self._now() + self.recovery_seconds

    def seconds_until_close(self) -> float:
        if self._retry_at is None:
            return 0.0
        return max(self._retry_at - self._now(), 0.0)
