"""Shared factories for Pipewatch unit tests."""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from pipewatch.models.events import PIPELINES_BY_ID, BuildStatus, Event

BASE_TIME = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)


def make_event(
    sequence: int = 1,
    pipeline_id: str = "pipeline-core-api",
    status: BuildStatus = BuildStatus.SUCCESS,
    is_deployment: bool = False,
    timestamp: datetime | None = None,
    triggered_by: str = "jenkins-ci",
    duration_seconds: int = 120,
) -> Event:
    """Create an Event with sensible defaults for testing."""
    pipeline = PIPELINES_BY_ID[pipeline_id]
    return Event(
        sequence=sequence,
        source_id=pipeline.id,
        source_name=pipeline.name,
        environment=pipeline.environment,
        triggered_by=triggered_by,
        status=status,
        duration_seconds=duration_seconds,
        timestamp=timestamp or BASE_TIME + timedelta(minutes=sequence),
        is_deployment=is_deployment,
    )


def scripted_rng(randoms: list[float], duration: int = 300) -> MagicMock:
    """RNG whose random() yields *randoms* in order and whose choice() picks the first candidate."""
    rng = MagicMock(spec=random.Random)
    rng.random.side_effect = list(randoms)
    rng.choice.side_effect = lambda seq: seq[0]
    rng.randint.return_value = duration
    return rng
