"""Periodic /status polling on the running event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from sunctl.lib.device import DeviceError
from sunctl.lib.models import DeviceStatus

POLL_INTERVAL = 5.0
RAMP_SETTLE_DELAY = 0.8
STOP_SETTLE_DELAY = 0.5

log = logging.getLogger("sunctl")


@dataclass
class StatusPoller:
    """Fetch device status now, every `interval` seconds, and on demand.

    A poll requested while another fetch is outstanding waits for that fetch
    instead of starting a second one.
    """

    fetch_status: Callable[[], Awaitable[DeviceStatus]]
    on_status: Callable[[DeviceStatus], None]
    on_failure: Callable[[], None]
    interval: float = POLL_INTERVAL
    _inflight: asyncio.Future[DeviceStatus | None] | None = field(
        default=None, init=False, repr=False
    )
    _loop_task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    _deferred: set[asyncio.Task[DeviceStatus | None]] = field(
        default_factory=set, init=False, repr=False
    )

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def poll_once(self) -> DeviceStatus | None:
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._fetch_and_apply())
        return await asyncio.shield(self._inflight)

    async def _fetch_and_apply(self) -> DeviceStatus | None:
        try:
            status = await self.fetch_status()
        except DeviceError as exc:
            log.debug("Poll failed: %s", exc)
            self.on_failure()
            return None
        self.on_status(status)
        return status

    def start(self) -> asyncio.Task[None]:
        if self.running:
            raise RuntimeError("Poller is already running.")
        self._loop_task = asyncio.create_task(self._run(), name="status-poller")
        return self._loop_task

    async def _run(self) -> None:
        log.debug("Polling every %.1fs", self.interval)
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def refresh_later(self, delay: float) -> asyncio.Task[DeviceStatus | None]:
        """Schedule a single extra poll `delay` seconds from now."""

        async def deferred() -> DeviceStatus | None:
            await asyncio.sleep(delay)
            return await self.poll_once()

        task = asyncio.create_task(deferred())
        self._deferred.add(task)
        task.add_done_callback(self._deferred.discard)
        return task

    async def stop(self) -> None:
        tasks = [*self._deferred]
        if self._loop_task is not None:
            tasks.append(self._loop_task)
        if self._inflight is not None:
            tasks.append(self._inflight)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loop_task = None
        self._inflight = None
        self._deferred.clear()
        log.debug("Poller stopped")
