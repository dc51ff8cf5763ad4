"""Append-only event store with FIFO eviction.

Storage order is insertion order, which is not necessarily time order.
Consumers that need chronological order must sort explicitly.

The refresh task appends on the event loop while sync API handlers read
from the thread pool, so a single lock guards the deque and ``all()``
returns a copy.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable

from pipewatch.models.events import Event
from pipewatch.observability.logging import get_logger
from pipewatch.observability.metrics import events_evicted_total, store_size

_log = get_logger("store")

DEFAULT_MAX_EVENTS = 40


class EventStore:
    """Retains at most ``capacity`` events, evicting the oldest appended first."""

    def __init__(self, capacity: int = DEFAULT_MAX_EVENTS) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._events: deque[Event] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, event: Event) -> list[Event]:
        """Append *event* and return whatever was evicted to make room."""
        with self._lock:
            evicted: list[Event] = []
            if len(self._events) == self._capacity:
                evicted.append(self._events[0])
            self._events.append(event)
            size = len(self._events)

        store_size.set(size)
        if evicted:
            events_evicted_total.inc(len(evicted))
            _log.debug("events_evicted", count=len(evicted), oldest=evicted[0].id, size=size)
        return evicted

    def extend(self, events: Iterable[Event]) -> list[Event]:
        """Append every event in order; returns all evicted events."""
        evicted: list[Event] = []
        for event in events:
            evicted.extend(self.append(event))
        return evicted

    def all(self) -> list[Event]:
        """Snapshot of the retained events in insertion order."""
        with self._lock:
            return list(self._events)

    def latest(self) -> Event | None:
        """Most recently appended event, or None when empty."""
        with self._lock:
            return self._events[-1] if self._events else None

    def count(self) -> int:
        with self._lock:
            return len(self._events)

    def __len__(self) -> int:
        return self.count()
