"""Prometheus metrics for the event pipeline.

All collectors live on the default registry so ``GET /api/v1/metrics`` can
expose them with ``generate_latest()``.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge

events_generated_total = Counter(
    "pipewatch_events_generated_total",
    "Synthetic pipeline events produced by the generator.",
    ["status"],
)

events_evicted_total = Counter(
    "pipewatch_events_evicted_total",
    "Events dropped from the front of the store on overflow.",
)

store_size = Gauge(
    "pipewatch_store_size",
    "Events currently retained in the store.",
)

snapshot_writes_total = Counter(
    "pipewatch_snapshot_writes_total",
    "Key-value snapshot writes, by outcome.",
    ["success"],
)

subscriber_errors_total = Counter(
    "pipewatch_subscriber_errors_total",
    "Exceptions raised by on_update subscribers.",
)
