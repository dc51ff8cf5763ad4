"""The dashboard aggregate: generator, store and current filter criteria.

One Dashboard instance owns all mutable simulator state. The refresh
driver, the REST API and the CLI receive it explicitly.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta

from pipewatch import aggregator
from pipewatch.generator import DEFAULT_SEED_COUNT, DEFAULT_SEED_SPACING, EventGenerator
from pipewatch.models.analysis import DeploymentOutcomes, PipelineCount, Summary, TimeSeries
from pipewatch.models.events import Event
from pipewatch.models.filters import FilterCriteria
from pipewatch.observability.logging import get_logger
from pipewatch.query import query, validate_criteria
from pipewatch.store import EventStore

_log = get_logger("dashboard")

DEFAULT_BUCKET_COUNT = 20


class Dashboard:
    """Owns the event pipeline state and exposes its derived views."""

    def __init__(
        self,
        generator: EventGenerator | None = None,
        store: EventStore | None = None,
        bucket_count: int = DEFAULT_BUCKET_COUNT,
    ) -> None:
        self.generator = generator or EventGenerator()
        self.store = store or EventStore()
        self.bucket_count = bucket_count
        self._filters = FilterCriteria()
        self._filters_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def seed(
        self,
        count: int = DEFAULT_SEED_COUNT,
        spacing: timedelta = DEFAULT_SEED_SPACING,
        now: datetime | None = None,
    ) -> list[Event]:
        """Populate the store with backdated history, oldest first."""
        events = self.generator.seed_history(count=count, spacing=spacing, now=now)
        self.store.extend(events)
        _log.info("dashboard_seeded", count=len(events), retained=self.store.count())
        return events

    def tick(self) -> Event:
        """Generate one live event and append it, evicting if needed."""
        event = self.generator.generate()
        self.store.append(event)
        _log.debug("event_generated", id=event.id, status=event.status.value, pipeline=event.source_id)
        return event

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    @property
    def filters(self) -> FilterCriteria:
        with self._filters_lock:
            return self._filters

    def set_filters(self, criteria: FilterCriteria) -> FilterCriteria:
        """Replace the current criteria. Raises ValueError on unknown ids."""
        validate_criteria(criteria)
        with self._filters_lock:
            self._filters = criteria
        return criteria

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def events(self) -> list[Event]:
        return self.store.all()

    def summary(self) -> Summary:
        return aggregator.summary(self.store.all())

    def time_series(self, bucket_count: int | None = None) -> TimeSeries:
        return aggregator.time_series(self.store.all(), bucket_count or self.bucket_count)

    def per_source_counts(self) -> list[PipelineCount]:
        return aggregator.per_source_counts(self.store.all())

    def deployment_outcomes(self) -> DeploymentOutcomes:
        return aggregator.deployment_outcomes(self.store.all())

    def query(self, criteria: FilterCriteria | None = None) -> list[Event]:
        """Filtered events, newest first. Uses the current criteria by default."""
        return query(self.store.all(), criteria if criteria is not None else self.filters)
