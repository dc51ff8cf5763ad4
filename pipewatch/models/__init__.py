"""Core data structures for Pipewatch."""

from pipewatch.models.analysis import DeploymentOutcomes, PipelineCount, Summary, TimeSeries
from pipewatch.models.config import PipewatchConfig
from pipewatch.models.events import (
    ALL,
    PIPELINES,
    PIPELINES_BY_ID,
    TRIGGERED_BY,
    BuildStatus,
    Environment,
    Event,
    Pipeline,
    display_id,
)
from pipewatch.models.filters import FilterCriteria

__all__ = [
    "ALL",
    "BuildStatus",
    "DeploymentOutcomes",
    "Environment",
    "Event",
    "FilterCriteria",
    "PIPELINES",
    "PIPELINES_BY_ID",
    "Pipeline",
    "PipelineCount",
    "PipewatchConfig",
    "Summary",
    "TRIGGERED_BY",
    "TimeSeries",
    "display_id",
]
