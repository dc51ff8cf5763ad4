"""Filter criteria applied at query time."""

from __future__ import annotations

from dataclasses import dataclass

from pipewatch.models.events import ALL


@dataclass(frozen=True)
class FilterCriteria:
    """Pipeline, environment and free-text filters.

    ``"all"`` for pipeline or environment matches every event. Criteria are
    never persisted with events.
    """

    pipeline_id: str = ALL
    environment: str = ALL
    search: str = ""
