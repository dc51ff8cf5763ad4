"""Shared fixtures for Pipewatch integration tests.

Provides a seeded dashboard and a fast refresh driver wired together so
tests can exercise the full generate -> append -> notify -> recompute loop.
"""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from pipewatch.dashboard import Dashboard
from pipewatch.driver import RefreshDriver
from pipewatch.generator import EventGenerator
from pipewatch.models.config import (
    PipewatchConfig,
    SimulationConfig,
    SnapshotConfig,
    StoreConfig,
)
from pipewatch.store import EventStore

_NOW = datetime.now(UTC)

FAST_INTERVAL_MS = 10


def make_dashboard(seed: int = 1234, capacity: int = 40, seed_count: int = 30) -> Dashboard:
    """Seeded dashboard with a deterministic random source."""
    dashboard = Dashboard(
        generator=EventGenerator(rng=random.Random(seed)),
        store=EventStore(capacity=capacity),
    )
    dashboard.seed(count=seed_count, spacing=timedelta(minutes=5), now=_NOW)
    return dashboard


def make_config(tmp_path: Path, snapshot: bool = True, seed_count: int = 30) -> PipewatchConfig:
    """Config for an in-process app: fast ticks, snapshot under tmp_path."""
    return PipewatchConfig(
        store=StoreConfig(max_events=40),
        simulation=SimulationConfig(
            refresh_interval_ms=FAST_INTERVAL_MS,
            seed_count=seed_count,
            random_seed=99,
        ),
        snapshot=SnapshotConfig(enabled=snapshot, path=str(tmp_path / "snapshot.json")),
    )


@pytest.fixture
def dashboard() -> Dashboard:
    return make_dashboard()


@pytest.fixture
def driver(dashboard: Dashboard) -> RefreshDriver:
    return RefreshDriver(dashboard, interval_ms=FAST_INTERVAL_MS)
