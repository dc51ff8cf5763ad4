"""Predicate-based event retrieval."""

from __future__ import annotations

from collections.abc import Sequence

from pipewatch.models.events import ALL, PIPELINES_BY_ID, Environment, Event
from pipewatch.models.filters import FilterCriteria
from pipewatch.query.formatting import format_timestamp


def _haystack(event: Event) -> str:
    return " ".join(
        [
            event.id,
            event.source_name,
            event.triggered_by,
            event.status.value,
            event.environment.value,
            format_timestamp(event.timestamp),
        ]
    ).lower()


def matches(event: Event, criteria: FilterCriteria) -> bool:
    """Return True if *event* passes every active criterion."""
    if criteria.pipeline_id != ALL and event.source_id != criteria.pipeline_id:
        return False
    if criteria.environment != ALL and event.environment != criteria.environment:
        return False
    if criteria.search.strip() and criteria.search.lower() not in _haystack(event):
        return False
    return True


def query(events: Sequence[Event], criteria: FilterCriteria | None = None) -> list[Event]:
    """Filter *events* and order them newest first.

    The sort is stable, so events sharing a timestamp keep insertion order.
    An empty input yields an empty list.
    """
    criteria = criteria or FilterCriteria()
    selected = [e for e in events if matches(e, criteria)]
    return sorted(selected, key=lambda e: e.timestamp, reverse=True)


def validate_criteria(criteria: FilterCriteria) -> FilterCriteria:
    """Reject pipeline ids and environments outside the known catalogue.

    Raises:
        ValueError: naming the offending field.
    """
    if criteria.pipeline_id != ALL and criteria.pipeline_id not in PIPELINES_BY_ID:
        raise ValueError(f"unknown pipeline: {criteria.pipeline_id!r}")
    if criteria.environment != ALL and criteria.environment not in {e.value for e in Environment}:
        raise ValueError(f"unknown environment: {criteria.environment!r}")
    return criteria
