"""In-process typed event channels.

A channel has exactly one owner that publishes; everyone else receives an
``EventStream`` view that can only subscribe. Subscribers may be plain
callables or coroutine functions. A failing subscriber is logged and skipped
so one broken consumer cannot stall the publisher.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], Awaitable[None] | None]

logger = logging.getLogger(__name__)


class EventStream(Generic[T]):
    """Subscribe-only view of an ``EventChannel``."""

    def __init__(self, channel: EventChannel[T]):
        self._channel = channel

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        return self._channel.subscribe(callback)

    @property
    def last(self) -> T | None:
        return self._channel.last


class EventChannel(Generic[T]):
    """Ordered fan-out of events to registered subscribers."""

    def __init__(self, name: str):
        self.name = name
        self._subscribers: list[Subscriber[T]] = []
        self._last: T | None = None

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    async def publish(self, event: T) -> int:
        """Deliver ``event`` to every subscriber; returns how many succeeded."""
        self._last = event
        delivered = 0
        for callback in list(self._subscribers):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as exc:  # noqa: BLE001
                logger.warning("Event subscriber failed: channel=%s error=%s", self.name, exc)
        return delivered

    def view(self) -> EventStream[T]:
        return EventStream(self)

    @property
    def last(self) -> T | None:
        return self._last

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
