"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class StoreConfig:
    """Event store configuration."""

    max_events: int = 40


@dataclass
class SimulationConfig:
    """Event generator and refresh driver configuration."""

    refresh_interval_ms: int = 5000
    seed_count: int = 30
    seed_spacing_minutes: int = 5
    random_seed: int | None = None


@dataclass
class AggregationConfig:
    """Aggregator configuration."""

    bucket_count: int = 20


@dataclass
class SnapshotConfig:
    """Key-value snapshot persistence configuration."""

    enabled: bool = False
    path: str = "pipewatch-snapshot.json"


@dataclass
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class PipewatchConfig:
    """Top-level Pipewatch configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
