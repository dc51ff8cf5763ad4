"""Simplified build-history snapshot kept under a fixed key.

Record format (newest first)::

    {"buildNumber": 12, "buildStatus": "Success",
     "deploymentStatus": "Deployed", "timestamp": "2026-10-19T12:00:00Z"}

A missing or malformed snapshot loads as empty history. Write failures are
logged and counted; they never interrupt the refresh loop. Per-tick writes
run in a worker thread so file I/O stays off the event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from pipewatch.dashboard import Dashboard
from pipewatch.models.events import BuildStatus, Event
from pipewatch.observability.logging import get_logger
from pipewatch.observability.metrics import snapshot_writes_total
from pipewatch.persistence.kv_store import JsonFileKeyValueStore, KeyValueStoreError

_log = get_logger("persistence.snapshot")

SNAPSHOT_KEY = "cicd-dashboard-builds"


class SnapshotRecord(BaseModel):
    """One persisted build in the simplified snapshot format."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    build_number: int = Field(alias="buildNumber", ge=1)
    build_status: Literal["Success", "Failure"] = Field(alias="buildStatus")
    deployment_status: Literal["Deployed", "Failed"] = Field(alias="deploymentStatus")
    timestamp: datetime


_RECORDS = TypeAdapter(list[SnapshotRecord])


def record_from_event(event: Event) -> SnapshotRecord:
    """Collapse an event to the two-valued snapshot statuses."""
    return SnapshotRecord(
        build_number=event.sequence,
        build_status="Success" if event.status == BuildStatus.SUCCESS else "Failure",
        deployment_status="Deployed" if event.is_successful_deployment else "Failed",
        timestamp=event.timestamp,
    )


def load_snapshot(kv: JsonFileKeyValueStore, key: str = SNAPSHOT_KEY) -> list[SnapshotRecord]:
    """Load persisted records; any failure yields an empty list."""
    try:
        raw = kv.get(key)
    except KeyValueStoreError as exc:
        _log.warning("snapshot_load_failed", path=str(kv.path), error=str(exc))
        return []
    if raw is None:
        return []
    try:
        return _RECORDS.validate_python(raw)
    except ValidationError as exc:
        _log.warning("snapshot_invalid", path=str(kv.path), errors=exc.error_count())
        return []


class SnapshotPersister:
    """Keeps the snapshot in step with the dashboard.

    Subscribe ``persist_latest`` to the refresh driver's ``on_update``: each
    call prepends the newest event's record at once and returns a coroutine
    that overwrites the snapshot from a worker thread. At most
    ``max_records`` entries are retained.
    """

    def __init__(
        self,
        dashboard: Dashboard,
        kv: JsonFileKeyValueStore,
        max_records: int,
        key: str = SNAPSHOT_KEY,
    ) -> None:
        self._dashboard = dashboard
        self._kv = kv
        self._key = key
        self._max_records = max_records
        self._records: list[SnapshotRecord] = []
        # Serialises off-loop writes so they land in tick order.
        self._write_lock = asyncio.Lock()

    @property
    def records(self) -> list[SnapshotRecord]:
        return list(self._records)

    def restore(self) -> list[SnapshotRecord]:
        """Merge the persisted history with the current store and save it.

        Events already in the store (the seeded history of this run) are
        placed newest first ahead of the loaded records; build numbers the
        snapshot already holds are not duplicated.
        """
        loaded = load_snapshot(self._kv, self._key)
        known = {r.build_number for r in loaded}
        ordered = sorted(self._dashboard.events(), key=lambda e: e.timestamp, reverse=True)
        current = [record_from_event(e) for e in ordered if e.sequence not in known]
        self._records = (current + loaded)[: self._max_records]
        if loaded:
            _log.info("snapshot_restored", records=len(loaded), added=len(current), path=str(self._kv.path))
        self.save()
        return self.records

    def persist_latest(self) -> Coroutine[Any, Any, None] | None:
        latest = self._dashboard.store.latest()
        if latest is None:
            return None
        self._records.insert(0, record_from_event(latest))
        del self._records[self._max_records :]
        return self._save_off_loop(self._payload())

    def save(self) -> bool:
        return self._write(self._payload())

    async def _save_off_loop(self, payload: list[dict[str, Any]]) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._write, payload)

    def _payload(self) -> list[dict[str, Any]]:
        return _RECORDS.dump_python(self._records, mode="json", by_alias=True)

    def _write(self, payload: list[dict[str, Any]]) -> bool:
        try:
            self._kv.set(self._key, payload)
        except KeyValueStoreError as exc:
            snapshot_writes_total.labels(success="false").inc()
            _log.warning("snapshot_write_failed", path=str(self._kv.path), error=str(exc))
            return False
        snapshot_writes_total.labels(success="true").inc()
        return True
