"""Pydantic request/response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from pipewatch.models.analysis import DeploymentOutcomes, PipelineCount, Summary, TimeSeries
from pipewatch.models.events import ALL, Event
from pipewatch.models.filters import FilterCriteria
from pipewatch.query.formatting import format_duration, format_timestamp


class ErrorResponse(BaseModel):
    """Error envelope returned for every 4xx/5xx."""

    error: str
    detail: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    events: int


class EventResponse(BaseModel):
    id: str
    sequence: int
    pipeline_id: str
    pipeline_name: str
    environment: str
    triggered_by: str
    status: str
    duration_seconds: int
    duration: str
    timestamp: datetime
    timestamp_display: str
    is_deployment: bool

    @classmethod
    def from_event(cls, event: Event) -> EventResponse:
        return cls(
            id=event.id,
            sequence=event.sequence,
            pipeline_id=event.source_id,
            pipeline_name=event.source_name,
            environment=event.environment.value,
            triggered_by=event.triggered_by,
            status=event.status.value,
            duration_seconds=event.duration_seconds,
            duration=format_duration(event.duration_seconds),
            timestamp=event.timestamp,
            timestamp_display=format_timestamp(event.timestamp),
            is_deployment=event.is_deployment,
        )


class SummaryResponse(BaseModel):
    total: int
    successes: int
    failures: int
    deployments: int
    deployment_successes: int
    deployment_rate: int = Field(ge=0, le=100)

    @classmethod
    def from_summary(cls, summary: Summary) -> SummaryResponse:
        return cls(
            total=summary.total,
            successes=summary.successes,
            failures=summary.failures,
            deployments=summary.deployments,
            deployment_successes=summary.deployment_successes,
            deployment_rate=summary.deployment_rate,
        )


class TimeSeriesResponse(BaseModel):
    bucket_count: int
    bucket_width_ms: float
    labels: list[str]
    success_counts: list[int]
    failure_counts: list[int]

    @classmethod
    def from_series(cls, series: TimeSeries) -> TimeSeriesResponse:
        return cls(
            bucket_count=series.bucket_count,
            bucket_width_ms=series.bucket_width_ms,
            labels=series.labels,
            success_counts=series.success_counts,
            failure_counts=series.failure_counts,
        )


class PipelineCountResponse(BaseModel):
    pipeline_id: str
    pipeline_name: str
    count: int

    @classmethod
    def from_count(cls, count: PipelineCount) -> PipelineCountResponse:
        return cls(pipeline_id=count.pipeline_id, pipeline_name=count.pipeline_name, count=count.count)


class DeploymentOutcomesResponse(BaseModel):
    success: int
    failed: int

    @classmethod
    def from_outcomes(cls, outcomes: DeploymentOutcomes) -> DeploymentOutcomesResponse:
        return cls(success=outcomes.success, failed=outcomes.failed)


class FiltersBody(BaseModel):
    """Current filter criteria. ``"all"`` disables a dimension."""

    pipeline: str = Field(default=ALL, max_length=128)
    environment: str = Field(default=ALL, max_length=32)
    search: str = Field(default="", max_length=256)

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(pipeline_id=self.pipeline, environment=self.environment, search=self.search)

    @classmethod
    def from_criteria(cls, criteria: FilterCriteria) -> FiltersBody:
        return cls(pipeline=criteria.pipeline_id, environment=criteria.environment, search=criteria.search)


class EventListResponse(BaseModel):
    filters: FiltersBody
    count: int
    events: list[EventResponse]
