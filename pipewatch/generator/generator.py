"""Synthetic pipeline-run generator.

Status is drawn from a single uniform sample ``r``:

    r <  0.65          -> success
    0.65 <= r < 0.85   -> running
    r >= 0.85          -> failed

A run is a deployment with probability 0.4, but never while running.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from pipewatch.models.events import PIPELINES, TRIGGERED_BY, BuildStatus, Event, Pipeline
from pipewatch.observability.logging import get_logger
from pipewatch.observability.metrics import events_generated_total

_log = get_logger("generator")

_SUCCESS_THRESHOLD = 0.65
_RUNNING_THRESHOLD = 0.85
_DEPLOYMENT_PROBABILITY = 0.4
_MIN_DURATION_SECONDS = 45
_MAX_DURATION_SECONDS = 1200

DEFAULT_SEED_COUNT = 30
DEFAULT_SEED_SPACING = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class EventGenerator:
    """Produces synthetic Event records with monotonically increasing sequence numbers.

    Args:
        rng:            Random source. Pass a seeded ``random.Random`` for
                        reproducible output.
        clock:          Returns the current time; used when no timestamp is given.
        start_sequence: First sequence number handed out. Defaults to 1.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
        start_sequence: int = 1,
    ) -> None:
        if start_sequence < 1:
            raise ValueError(f"start_sequence must be >= 1, got {start_sequence}")
        self._rng = rng or random.Random()
        self._clock = clock
        self._next_sequence = start_sequence

    @property
    def next_sequence(self) -> int:
        """Sequence number the next generated event will receive."""
        return self._next_sequence

    def generate(self, timestamp: datetime | None = None) -> Event:
        """Create one event and consume the next sequence number."""
        pipeline: Pipeline = self._rng.choice(PIPELINES)

        r = self._rng.random()
        if r < _SUCCESS_THRESHOLD:
            status = BuildStatus.SUCCESS
        elif r < _RUNNING_THRESHOLD:
            status = BuildStatus.RUNNING
        else:
            status = BuildStatus.FAILED

        is_deployment = self._rng.random() < _DEPLOYMENT_PROBABILITY and status != BuildStatus.RUNNING
        duration = self._rng.randint(_MIN_DURATION_SECONDS, _MAX_DURATION_SECONDS)

        sequence = self._next_sequence
        self._next_sequence += 1

        event = Event(
            sequence=sequence,
            source_id=pipeline.id,
            source_name=pipeline.name,
            environment=pipeline.environment,
            triggered_by=self._rng.choice(TRIGGERED_BY),
            status=status,
            duration_seconds=duration,
            timestamp=timestamp if timestamp is not None else self._clock(),
            is_deployment=is_deployment,
        )
        events_generated_total.labels(status=status.value).inc()
        return event

    def seed_history(
        self,
        count: int = DEFAULT_SEED_COUNT,
        spacing: timedelta = DEFAULT_SEED_SPACING,
        now: datetime | None = None,
    ) -> list[Event]:
        """Build an initial history of *count* events, oldest first.

        Events are backdated at fixed *spacing*; the last one is stamped *now*.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        anchor = now if now is not None else self._clock()
        events = [self.generate(timestamp=anchor - spacing * i) for i in range(count - 1, -1, -1)]
        _log.debug("seed_history_generated", count=count, spacing_seconds=spacing.total_seconds())
        return events
