"""Core event data structures and enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class BuildStatus(StrEnum):
    """Outcome of a pipeline run. Fixed at creation; never transitions."""

    SUCCESS = "success"
    FAILED = "failed"
    RUNNING = "running"


class Environment(StrEnum):
    """Deployment environment a pipeline targets."""

    PROD = "prod"
    STAGING = "staging"


ALL = "all"


@dataclass(frozen=True)
class Pipeline:
    """A known pipeline from the fixed catalogue."""

    id: str
    name: str
    environment: Environment


# Declaration order is significant: per-pipeline counts are reported in it.
PIPELINES: tuple[Pipeline, ...] = (
    Pipeline("pipeline-core-api", "Core API", Environment.PROD),
    Pipeline("pipeline-web-frontend", "Web Frontend", Environment.PROD),
    Pipeline("pipeline-worker-jobs", "Worker Jobs", Environment.STAGING),
    Pipeline("pipeline-mobile-app", "Mobile App", Environment.STAGING),
    Pipeline("pipeline-data-pipeline", "Data Pipeline", Environment.PROD),
)

PIPELINES_BY_ID: dict[str, Pipeline] = {p.id: p for p in PIPELINES}

TRIGGERED_BY: tuple[str, ...] = (
    "github-actions[bot]",
    "jenkins-ci",
    "circleci",
    "gitlab-runner",
    "yash.raj",
    "platform-team",
    "release-bot",
)


def display_id(sequence: int) -> str:
    """Render a sequence number as ``#0007``."""
    return f"#{sequence:04d}"


@dataclass(frozen=True)
class Event:
    """A single synthetic pipeline run.

    Produced only by the EventGenerator. Immutable: stored, aggregated and
    queried but never mutated after creation.
    """

    sequence: int
    source_id: str
    source_name: str
    environment: Environment
    triggered_by: str
    status: BuildStatus
    duration_seconds: int
    timestamp: datetime
    is_deployment: bool = False

    def __post_init__(self) -> None:
        if self.sequence < 1:
            raise ValueError(f"sequence must be positive, got {self.sequence}")
        if self.duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {self.duration_seconds}")
        if self.is_deployment and self.status == BuildStatus.RUNNING:
            raise ValueError("a running event cannot be a deployment")

    @property
    def id(self) -> str:
        return display_id(self.sequence)

    @property
    def is_successful_deployment(self) -> bool:
        return self.is_deployment and self.status == BuildStatus.SUCCESS
