"""JSON-file-backed key-value store.

The whole file is one JSON object mapping keys to values. Writes go to a
temporary file that replaces the original, so a crash mid-write leaves the
previous contents intact.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any


class KeyValueStoreError(Exception):
    """Raised when the backing file cannot be read, parsed or written."""


class JsonFileKeyValueStore:
    """Minimal get/set store persisted to a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Any | None:
        """Return the value under *key*, or None if the key or file is absent."""
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        """Overwrite *key* with *value* and persist the file."""
        with self._lock:
            try:
                data = self._read()
            except KeyValueStoreError:
                data = {}
            data[key] = value
            self._write(data)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise KeyValueStoreError(f"cannot read {self._path}: {exc}") from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise KeyValueStoreError(f"invalid JSON in {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise KeyValueStoreError(f"{self._path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            raise KeyValueStoreError(f"cannot write {self._path}: {exc}") from exc
