"""Aggregated view data structures derived from the event store."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Summary:
    """Headline counters for the dashboard summary cards."""

    total: int = 0
    successes: int = 0
    failures: int = 0
    deployments: int = 0
    deployment_successes: int = 0
    deployment_rate: int = 0  # percent, 0..100


@dataclass
class TimeSeries:
    """Success/failure counts grouped into equal-width time buckets.

    All three lists have the same length: the bucket count, or zero when the
    store was empty.
    """

    labels: list[str] = field(default_factory=list)
    success_counts: list[int] = field(default_factory=list)
    failure_counts: list[int] = field(default_factory=list)
    bucket_width_ms: float = 0.0

    @property
    def bucket_count(self) -> int:
        return len(self.labels)


@dataclass(frozen=True)
class PipelineCount:
    """Number of retained events attributed to one pipeline."""

    pipeline_id: str
    pipeline_name: str
    count: int


@dataclass(frozen=True)
class DeploymentOutcomes:
    """Deployment results split by outcome."""

    success: int = 0
    failed: int = 0
