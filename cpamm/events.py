"""Ordered, append-only log of pool notifications."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import structlog

from cpamm.models.events import PoolEvent

logger = structlog.get_logger()

Subscriber = Callable[[PoolEvent], None]


class EventLog:
    """Append-only event log with synchronous subscribers.

    Subscribers run in registration order right after the event is
    appended. An exception raised by a subscriber is logged and does not
    reach the caller of ``emit``; the remaining subscribers are still
    notified.
    """

    def __init__(self) -> None:
        self._events: list[PoolEvent] = []
        self._subscribers: list[Subscriber] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[PoolEvent]:
        return iter(self._events)

    @property
    def events(self) -> tuple[PoolEvent, ...]:
        return tuple(self._events)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register an observer. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, event: PoolEvent) -> None:
        self._events.append(event)
        logger.debug("event_emitted", kind=event.kind, index=len(self._events) - 1)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("subscriber_failed", kind=event.kind)
