"""Derived dashboard views: summary counters, time series, per-pipeline counts.

Every function here is pure over a snapshot of the store.
"""

from pipewatch.aggregator.aggregator import (
    deployment_outcomes,
    deployment_rate,
    per_source_counts,
    summary,
    time_series,
)

__all__ = [
    "deployment_outcomes",
    "deployment_rate",
    "per_source_counts",
    "summary",
    "time_series",
]
