"""Application bootstrap for Pipewatch.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: config -> logging -> snapshot load -> dashboard (+seed)
              -> snapshot persister -> refresh driver -> REST

Shutdown stops components in reverse startup order. Each component's stop
error is caught and logged independently so that one failure does not
prevent the rest from shutting down cleanly.
"""

from __future__ import annotations

import asyncio
import random
import signal
from datetime import timedelta
from typing import TYPE_CHECKING

from pipewatch.config import load_config
from pipewatch.dashboard import Dashboard
from pipewatch.driver import RefreshDriver
from pipewatch.generator import EventGenerator
from pipewatch.models.config import PipewatchConfig
from pipewatch.observability.logging import get_logger, setup_logging
from pipewatch.persistence import JsonFileKeyValueStore, SnapshotPersister, SnapshotRecord, load_snapshot
from pipewatch.store import EventStore

if TYPE_CHECKING:
    import structlog

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


def build_dashboard(config: PipewatchConfig, start_sequence: int = 1) -> Dashboard:
    """Create a seeded Dashboard from *config*."""
    seed = config.simulation.random_seed
    generator = EventGenerator(
        rng=random.Random(seed) if seed is not None else None,
        start_sequence=start_sequence,
    )
    dashboard = Dashboard(
        generator=generator,
        store=EventStore(capacity=config.store.max_events),
        bucket_count=config.aggregation.bucket_count,
    )
    dashboard.seed(
        count=config.simulation.seed_count,
        spacing=timedelta(minutes=config.simulation.seed_spacing_minutes),
    )
    return dashboard


def next_sequence_after(records: list[SnapshotRecord]) -> int:
    """First sequence number not used by any restored record."""
    return max((r.build_number for r in records), default=0) + 1


class PipewatchApp:
    """Application root. Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already stopped)
    is safe.
    """

    def __init__(self, config: PipewatchConfig | None = None) -> None:
        self.config: PipewatchConfig | None = config

        self.dashboard: Dashboard | None = None
        self._kv: JsonFileKeyValueStore | None = None
        self._persister: SnapshotPersister | None = None
        self._driver: RefreshDriver | None = None
        self._rest_server: object | None = None

        # Background tasks that must be cancelled on shutdown
        self._background_tasks: list[asyncio.Task[None]] = []

        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self, serve: bool = True) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        Pass ``serve=False`` to skip the REST server.
        """
        # --- 1. Configuration -------------------------------------------
        if self.config is None:
            self.config = load_config()

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("pipewatch starting", version=_pipewatch_version())

        # --- 3. Dashboard (restores sequence numbers from the snapshot) --
        await self._start_dashboard()

        # --- 4. Snapshot persister (optional) ---------------------------
        await self._start_persister()

        # --- 5. Refresh driver ------------------------------------------
        await self._start_driver()

        # --- 6. REST API ------------------------------------------------
        if serve:
            await self._start_rest()

        self._running = True
        self._log.info("pipewatch started", port=self.config.api.port)

    # ------------------------------------------------------------------
    # Component startup helpers
    # ------------------------------------------------------------------

    async def _start_dashboard(self) -> None:
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting dashboard")
        try:
            start_sequence = 1
            if self.config.snapshot.enabled:
                self._kv = JsonFileKeyValueStore(self.config.snapshot.path)
                start_sequence = next_sequence_after(load_snapshot(self._kv))
            self.dashboard = build_dashboard(self.config, start_sequence=start_sequence)
            self._log.info(
                "dashboard started",
                retained=self.dashboard.store.count(),
                capacity=self.dashboard.store.capacity,
                next_sequence=self.dashboard.generator.next_sequence,
            )
        except Exception as exc:
            raise _ComponentError("dashboard", exc) from exc

    async def _start_persister(self) -> None:
        """Restore the key-value snapshot. Non-fatal: failures disable persistence."""
        assert self._log is not None
        assert self.config is not None
        assert self.dashboard is not None
        if self._kv is None:
            self._log.info("snapshot persistence disabled (snapshot.enabled=false)")
            return
        try:
            persister = SnapshotPersister(
                dashboard=self.dashboard,
                kv=self._kv,
                max_records=self.config.store.max_events,
            )
            persister.restore()
            self._persister = persister
            self._log.info("snapshot persister started", path=self.config.snapshot.path)
        except Exception as exc:
            self._log.warning(
                "snapshot persister failed to start; history will not be saved",
                error=str(exc),
            )
            self._persister = None

    async def _start_driver(self) -> None:
        assert self._log is not None
        assert self.config is not None
        assert self.dashboard is not None
        self._log.debug("starting refresh driver")
        try:
            driver = RefreshDriver(self.dashboard, interval_ms=self.config.simulation.refresh_interval_ms)
            if self._persister is not None:
                driver.on_update(self._persister.persist_latest)
            await driver.start()
            self._driver = driver
        except Exception as exc:
            raise _ComponentError("driver", exc) from exc

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        assert self.dashboard is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from pipewatch.api import build_app

            fastapi_app = build_app(
                dashboard=self.dashboard,
                config=self.config,
                persister=self._persister,
            )
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host="0.0.0.0",
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("rest api started", port=self.config.api.port)
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Gracefully stop all components in reverse startup order."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("pipewatch shutting down")

        self._running = False

        for task in reversed(self._background_tasks):
            if not task.done():
                task.cancel()

        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        self._background_tasks.clear()

        await self._stop_component("driver", self._driver)
        self._driver = None
        self._rest_server = None
        if self._persister is not None:
            self._persister.save()

        log.info("pipewatch stopped")

    async def _stop_component(self, name: str, component: object | None) -> None:
        """Call stop() on a component if it has that method, catching all errors."""
        if component is None:
            return
        log = self._log or get_logger("app")
        stop_fn = getattr(component, "stop", None)
        if stop_fn is None:
            return
        try:
            result = stop_fn()
            if asyncio.iscoroutine(result):
                await asyncio.wait_for(result, timeout=_SHUTDOWN_GRACE_SECONDS)
        except TimeoutError:
            log.warning("component stop timed out", component=name, timeout=_SHUTDOWN_GRACE_SECONDS)
        except Exception as exc:
            log.error("component stop raised an error", component=name, error=str(exc))


def _pipewatch_version() -> str:
    from pipewatch import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = PipewatchApp()
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        while app._running:
            await asyncio.sleep(1)
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app._running:
            await app.stop()
