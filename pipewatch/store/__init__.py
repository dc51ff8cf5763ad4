"""Capacity-bounded in-memory event store."""

from pipewatch.store.event_store import DEFAULT_MAX_EVENTS, EventStore

__all__ = ["DEFAULT_MAX_EVENTS", "EventStore"]
