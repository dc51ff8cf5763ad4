"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from pipewatch.models.config import (
    AggregationConfig,
    APIConfig,
    LogConfig,
    PipewatchConfig,
    SimulationConfig,
    SnapshotConfig,
    StoreConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"PIPEWATCH_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_optional_int(key: str) -> int | None:
    val = _env(key, "").strip()
    return int(val) if val else None


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> PipewatchConfig:
    """Load configuration from PIPEWATCH_* environment variables."""
    return PipewatchConfig(
        store=StoreConfig(
            max_events=_env_int("MAX_EVENTS", 40, min_val=1, max_val=10_000),
        ),
        simulation=SimulationConfig(
            refresh_interval_ms=_env_int("REFRESH_INTERVAL_MS", 5000, min_val=100, max_val=3_600_000),
            seed_count=_env_int("SEED_COUNT", 30, min_val=0, max_val=10_000),
            seed_spacing_minutes=_env_int("SEED_SPACING_MINUTES", 5, min_val=1, max_val=1440),
            random_seed=_env_optional_int("RANDOM_SEED"),
        ),
        aggregation=AggregationConfig(
            bucket_count=_env_int("BUCKET_COUNT", 20, min_val=1, max_val=500),
        ),
        snapshot=SnapshotConfig(
            enabled=_env_bool("SNAPSHOT_ENABLED", False),
            path=_env("SNAPSHOT_PATH", "pipewatch-snapshot.json"),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
