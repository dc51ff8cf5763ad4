"""Pure aggregation functions over an event snapshot."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import timedelta

from pipewatch.models.analysis import DeploymentOutcomes, PipelineCount, Summary, TimeSeries
from pipewatch.models.events import PIPELINES, BuildStatus, Event
from pipewatch.query.formatting import bucket_label

_ONE_MS = timedelta(milliseconds=1)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def deployment_rate(successes: int, deployments: int) -> int:
    """Percentage of successful deployments, 0 when there were none."""
    if deployments == 0:
        return 0
    return _round_half_up(successes / deployments * 100)


def summary(events: Sequence[Event]) -> Summary:
    """Headline counters over *events*."""
    successes = sum(1 for e in events if e.status == BuildStatus.SUCCESS)
    failures = sum(1 for e in events if e.status == BuildStatus.FAILED)
    deployments = [e for e in events if e.is_deployment]
    deployment_successes = sum(1 for e in deployments if e.status == BuildStatus.SUCCESS)
    return Summary(
        total=len(events),
        successes=successes,
        failures=failures,
        deployments=len(deployments),
        deployment_successes=deployment_successes,
        deployment_rate=deployment_rate(deployment_successes, len(deployments)),
    )


def time_series(events: Sequence[Event], bucket_count: int) -> TimeSeries:
    """Group success/failure counts into *bucket_count* equal-width buckets.

    The span runs from the oldest to the newest timestamp. A zero-width span
    (all timestamps equal) is treated as 1 ms so every event lands in bucket 0.
    Running events are not counted. An empty snapshot yields no buckets.
    """
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be >= 1, got {bucket_count}")
    if not events:
        return TimeSeries()

    ordered = sorted(events, key=lambda e: e.timestamp)
    start = ordered[0].timestamp
    end = ordered[-1].timestamp
    range_ms = max((end - start) / _ONE_MS, 1.0)
    bucket_width_ms = range_ms / bucket_count

    labels = [bucket_label(start + timedelta(milliseconds=bucket_width_ms * i)) for i in range(bucket_count)]
    success_counts = [0] * bucket_count
    failure_counts = [0] * bucket_count

    for event in ordered:
        offset_ms = (event.timestamp - start) / _ONE_MS
        index = min(bucket_count - 1, max(0, math.floor(offset_ms / range_ms * bucket_count)))
        if event.status == BuildStatus.SUCCESS:
            success_counts[index] += 1
        elif event.status == BuildStatus.FAILED:
            failure_counts[index] += 1

    return TimeSeries(
        labels=labels,
        success_counts=success_counts,
        failure_counts=failure_counts,
        bucket_width_ms=bucket_width_ms,
    )


def per_source_counts(events: Sequence[Event]) -> list[PipelineCount]:
    """Event count per known pipeline, in catalogue order, zeros included."""
    counts = {p.id: 0 for p in PIPELINES}
    for event in events:
        counts[event.source_id] = counts.get(event.source_id, 0) + 1
    return [PipelineCount(pipeline_id=p.id, pipeline_name=p.name, count=counts[p.id]) for p in PIPELINES]


def deployment_outcomes(events: Sequence[Event]) -> DeploymentOutcomes:
    """Successful versus failed deployments."""
    deployments = [e for e in events if e.is_deployment]
    return DeploymentOutcomes(
        success=sum(1 for e in deployments if e.status == BuildStatus.SUCCESS),
        failed=sum(1 for e in deployments if e.status == BuildStatus.FAILED),
    )
