"""Shared utility helpers."""

from dailyreport.utils.circuit_breaker import CircuitBreaker
from dailyreport.utils.retry import is_transient_error, retry_async

__all__ = [
    "CircuitBreaker",
    "is_transient_error",
    "retry_async",
]
