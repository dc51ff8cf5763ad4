"""REST route handlers.

Handlers are plain ``def`` functions: FastAPI runs them in its thread pool,
which is why the store and the filter criteria are lock-guarded.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from pipewatch.api.schemas import (
    DeploymentOutcomesResponse,
    EventListResponse,
    EventResponse,
    FiltersBody,
    HealthResponse,
    PipelineCountResponse,
    SummaryResponse,
    TimeSeriesResponse,
)
from pipewatch.dashboard import Dashboard
from pipewatch.models.filters import FilterCriteria
from pipewatch.query import validate_criteria

router = APIRouter()


class InvalidFilterError(Exception):
    """Raised when a filter names an unknown pipeline or environment."""


def _dashboard(request: Request) -> Dashboard:
    return request.app.state.dashboard  # type: ignore[no-any-return]


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    from pipewatch import __version__

    return HealthResponse(version=__version__, events=_dashboard(request).store.count())


@router.get("/summary", response_model=SummaryResponse)
def get_summary(request: Request) -> SummaryResponse:
    return SummaryResponse.from_summary(_dashboard(request).summary())


@router.get("/timeseries", response_model=TimeSeriesResponse)
def get_time_series(
    request: Request,
    buckets: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> TimeSeriesResponse:
    return TimeSeriesResponse.from_series(_dashboard(request).time_series(buckets))


@router.get("/pipelines", response_model=list[PipelineCountResponse])
def get_pipeline_counts(request: Request) -> list[PipelineCountResponse]:
    return [PipelineCountResponse.from_count(c) for c in _dashboard(request).per_source_counts()]


@router.get("/deployments", response_model=DeploymentOutcomesResponse)
def get_deployment_outcomes(request: Request) -> DeploymentOutcomesResponse:
    return DeploymentOutcomesResponse.from_outcomes(_dashboard(request).deployment_outcomes())


@router.get("/events", response_model=EventListResponse)
def list_events(
    request: Request,
    pipeline: Annotated[str | None, Query(max_length=128)] = None,
    environment: Annotated[str | None, Query(max_length=32)] = None,
    search: Annotated[str | None, Query(max_length=256)] = None,
) -> EventListResponse:
    """Filtered events, newest first. Omitted parameters use the current filters."""
    dashboard = _dashboard(request)
    current = dashboard.filters
    criteria = FilterCriteria(
        pipeline_id=pipeline if pipeline is not None else current.pipeline_id,
        environment=environment if environment is not None else current.environment,
        search=search if search is not None else current.search,
    )
    try:
        validate_criteria(criteria)
    except ValueError as exc:
        raise InvalidFilterError(str(exc)) from exc

    events = dashboard.query(criteria)
    return EventListResponse(
        filters=FiltersBody.from_criteria(criteria),
        count=len(events),
        events=[EventResponse.from_event(e) for e in events],
    )


@router.get("/filters", response_model=FiltersBody)
def get_filters(request: Request) -> FiltersBody:
    return FiltersBody.from_criteria(_dashboard(request).filters)


@router.put("/filters", response_model=FiltersBody)
def put_filters(request: Request, body: FiltersBody) -> FiltersBody:
    try:
        criteria = _dashboard(request).set_filters(body.to_criteria())
    except ValueError as exc:
        raise InvalidFilterError(str(exc)) from exc
    return FiltersBody.from_criteria(criteria)


@router.get("/history")
def get_history(request: Request) -> list[dict[str, Any]]:
    """Snapshot records, newest first; empty when persistence is disabled."""
    persister = request.app.state.persister
    if persister is None:
        return []
    return [r.model_dump(mode="json", by_alias=True) for r in persister.records]


@router.get("/metrics")
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
