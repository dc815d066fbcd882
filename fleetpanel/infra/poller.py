"""Fixed-period repeating task with switch-to-latest fetches.

Ticks are scheduled against the start time, not against request completion:
tick ``n`` fires at ``start + n * interval`` no matter how long tick ``n - 1``
took. If the event loop stalls past several slots, one tick fires on resume
and the schedule continues from the next future slot. When a tick fires
while the previous fetch is still running, the stale fetch is cancelled so an
older response can never land after a newer one.

Example:
    poller = RepeatingTask("workers", collection.refresh, interval=10.0)
    poller.start()
    ...
    await poller.stop()
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger


class RepeatingTask:
    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[Any]],
        *,
        interval: float,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._name = name
        self._fetch = fetch
        self._interval = interval
        self._stop = asyncio.Event()
        self._runner: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[None] | None = None
        self._ticks = 0
        self._log = logger.bind(component="poller", poller=name)

    @property
    def running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def interval(self) -> float:
        return self._interval

    def start(self) -> None:
        if self._runner is not None:
            raise RuntimeError(f"Poller {self._name} already started")
        self._log.debug("Starting poller every {interval}s", interval=self._interval)
        self._runner = asyncio.create_task(self._run(), name=f"poll-{self._name}")

    async def stop(self) -> None:
        if self._stop.is_set():
            return
        self._stop.set()
        self._log.debug("Stopping poller after {n} ticks", n=self._ticks)

        for task in (self._runner, self._inflight):
            if task is None or task.done():
                continue
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        slot = 0

        while not self._stop.is_set():
            self._fire()
            now = loop.time()
            # Slots missed while the loop was blocked are dropped, not replayed.
            slot = max(slot + 1, int((now - started) // self._interval) + 1)
            delay = max(0.0, started + slot * self._interval - now)
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stop.wait(), timeout=delay)

    def _fire(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._log.debug("Tick {n} supersedes a pending fetch", n=self._ticks)
            self._inflight.cancel()

        self._inflight = asyncio.create_task(
            self._tick(), name=f"poll-{self._name}-{self._ticks}"
        )
        self._ticks += 1

    async def _tick(self) -> None:
        try:
            await self._fetch()
        except Exception:
            self._log.exception("Poll tick failed")
