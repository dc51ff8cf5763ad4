"""Best-effort key-value snapshot of recent builds.

Submodules:
    kv_store -- JSON-file-backed key-value store.
    snapshot -- Simplified build records and the on_update persister.
"""

from pipewatch.persistence.kv_store import JsonFileKeyValueStore, KeyValueStoreError
from pipewatch.persistence.snapshot import (
    SNAPSHOT_KEY,
    SnapshotPersister,
    SnapshotRecord,
    load_snapshot,
    record_from_event,
)

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStoreError",
    "SNAPSHOT_KEY",
    "SnapshotPersister",
    "SnapshotRecord",
    "load_snapshot",
    "record_from_event",
]
