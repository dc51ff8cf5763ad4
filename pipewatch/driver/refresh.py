"""Fixed-interval refresh driver.

Each tick generates one event, appends it to the store (evicting if full)
and then notifies every ``on_update`` subscriber. Notifications carry no
payload; subscribers re-pull whatever views they need.

The driver is the only mutator of the store after seeding. Tick work is
synchronous and runs on the event loop, so ticks never overlap.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable

from pipewatch.dashboard import Dashboard
from pipewatch.models.events import Event
from pipewatch.observability.logging import get_logger
from pipewatch.observability.metrics import subscriber_errors_total

_log = get_logger("driver")

DEFAULT_INTERVAL_MS = 5000

UpdateCallback = Callable[[], Awaitable[None] | None]


class RefreshDriver:
    """Appends one generated event per interval and fans out update notifications.

    Subscriber failures are logged and counted; they never stop the loop
    or prevent the remaining subscribers from being notified.
    """

    def __init__(self, dashboard: Dashboard, interval_ms: int = DEFAULT_INTERVAL_MS) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._dashboard = dashboard
        self._interval = interval_ms / 1000.0
        self._subscribers: list[UpdateCallback] = []
        self._task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Future[None]] = set()
        self._ticks = 0

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def on_update(self, callback: UpdateCallback) -> None:
        """Register *callback* to run after every successful append."""
        self._subscribers.append(callback)

    def tick(self) -> Event:
        """Run one tick synchronously. Async subscribers are scheduled, not awaited.

        Their failures are recorded when the scheduled task completes.
        """
        event = self._dashboard.tick()
        self._ticks += 1
        for callback in self._subscribers:
            try:
                result = callback()
                if asyncio.iscoroutine(result):
                    future = asyncio.ensure_future(result)
                    self._pending.add(future)
                    future.add_done_callback(functools.partial(self._subscriber_done, callback))
            except Exception as exc:
                _record_failure(callback, exc)
        return event

    async def start(self) -> None:
        """Launch the background tick loop. Calling start twice is a no-op."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="refresh-driver")
        _log.info("refresh_driver_started", interval_ms=int(self._interval * 1000))

    async def stop(self) -> None:
        """Cancel the tick loop and wait for it to exit."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        _log.info("refresh_driver_stopped", ticks=self._ticks)

    def _subscriber_done(self, callback: UpdateCallback, future: asyncio.Future[None]) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            _record_failure(callback, exc)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception as exc:
                _log.error("refresh_tick_failed", error=str(exc))


def _record_failure(callback: UpdateCallback, exc: BaseException) -> None:
    subscriber_errors_total.inc()
    _log.error("update_subscriber_failed", callback=_name_of(callback), error=str(exc))


def _name_of(callback: UpdateCallback) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
