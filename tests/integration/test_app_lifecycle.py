"""Integration tests for PipewatchApp startup, snapshot restore and shutdown."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from pipewatch.app import PipewatchApp, build_dashboard, next_sequence_after
from pipewatch.persistence import SNAPSHOT_KEY, JsonFileKeyValueStore, load_snapshot

from .conftest import make_config

pytestmark = pytest.mark.integration


async def _run_until_ticks(app: PipewatchApp, ticks: int) -> None:
    assert app.dashboard is not None
    target = app.dashboard.generator.next_sequence + ticks
    for _ in range(500):
        if app.dashboard.generator.next_sequence >= target:
            return
        await asyncio.sleep(0.01)
    raise AssertionError("refresh driver did not tick")


class TestStartup:
    async def test_start_without_rest_seeds_and_ticks(self, tmp_path: Path) -> None:
        app = PipewatchApp(config=make_config(tmp_path, snapshot=False))
        await app.start(serve=False)
        try:
            assert app.dashboard is not None
            assert app.dashboard.store.count() == 30
            await _run_until_ticks(app, 2)
            assert app.dashboard.store.count() >= 32
        finally:
            await app.stop()

    async def test_snapshot_written_on_start_and_after_ticks(self, tmp_path: Path) -> None:
        config = make_config(tmp_path)
        app = PipewatchApp(config=config)
        await app.start(serve=False)
        try:
            await _run_until_ticks(app, 3)
        finally:
            await app.stop()

        records = load_snapshot(JsonFileKeyValueStore(config.snapshot.path))
        assert 33 <= len(records) <= 40
        numbers = [r.build_number for r in records]
        assert numbers == sorted(numbers, reverse=True)
        assert numbers[0] >= 33

    async def test_restart_continues_sequence_numbers(self, tmp_path: Path) -> None:
        config = make_config(tmp_path)
        first = PipewatchApp(config=config)
        await first.start(serve=False)
        await first.stop()
        highest = max(r.build_number for r in load_snapshot(JsonFileKeyValueStore(config.snapshot.path)))

        second = PipewatchApp(config=make_config(tmp_path))
        await second.start(serve=False)
        try:
            assert second.dashboard is not None
            assert min(e.sequence for e in second.dashboard.events()) == highest + 1
        finally:
            await second.stop()

        numbers = [r.build_number for r in load_snapshot(JsonFileKeyValueStore(config.snapshot.path))]
        assert highest + 1 in numbers
        assert numbers == sorted(numbers, reverse=True)
        assert numbers == list(range(numbers[0], numbers[0] - len(numbers), -1))

    async def test_malformed_snapshot_does_not_fail_startup(self, tmp_path: Path) -> None:
        config = make_config(tmp_path)
        Path(config.snapshot.path).write_text("{ definitely not json")

        app = PipewatchApp(config=config)
        await app.start(serve=False)
        try:
            assert app.dashboard is not None
            assert app.dashboard.events()[0].sequence == 1
        finally:
            await app.stop()

        stored = json.loads(Path(config.snapshot.path).read_text())
        assert isinstance(stored[SNAPSHOT_KEY], list)


class TestShutdown:
    async def test_stop_before_start_is_safe(self, tmp_path: Path) -> None:
        await PipewatchApp(config=make_config(tmp_path)).stop()

    async def test_stop_is_idempotent(self, tmp_path: Path) -> None:
        app = PipewatchApp(config=make_config(tmp_path, snapshot=False))
        await app.start(serve=False)
        await app.stop()
        await app.stop()


class TestHelpers:
    def test_next_sequence_after_empty(self) -> None:
        assert next_sequence_after([]) == 1

    def test_build_dashboard_honours_config(self, tmp_path: Path) -> None:
        config = make_config(tmp_path, seed_count=50)
        dashboard = build_dashboard(config, start_sequence=100)
        ids = [e.id for e in dashboard.events()]
        assert len(ids) == 40
        assert ids[0] == "#0110"
        assert ids[-1] == "#0149"

    def test_same_random_seed_reproduces_history(self, tmp_path: Path) -> None:
        a = build_dashboard(make_config(tmp_path))
        b = build_dashboard(make_config(tmp_path))
        assert [(e.source_id, e.status, e.is_deployment) for e in a.events()] == [
            (e.source_id, e.status, e.is_deployment) for e in b.events()
        ]
