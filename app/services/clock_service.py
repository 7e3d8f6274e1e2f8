"""
Clock service
Supplies the current instant, refreshed on a fixed interval
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

import pytz

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


class RefreshClock:
    """
    Cached "now" that only advances on tick()

    start() runs a background task on the current event loop that ticks every
    `interval_seconds`; stop() cancels it. Also usable as `async with clock:`.
    """

    def __init__(self, interval_seconds: float = 60.0, now_fn: Callable[[], datetime] = utc_now):
        self.interval_seconds = interval_seconds
        self._now_fn = now_fn
        self._now = now_fn()
        self._subscribers: List[Callable[[datetime], None]] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def now(self) -> datetime:
        return self._now

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: Callable[[datetime], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[datetime], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def tick(self) -> datetime:
        self._now = self._now_fn()
        for callback in self._subscribers:
            callback(self._now)
        return self._now

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.tick()
            except Exception:
                logger.exception("Clock tick failed")

    def start(self) -> None:
        """Start ticking; must be called from inside a running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Refresh clock started ({self.interval_seconds}s interval)")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Refresh clock stopped")

    async def __aenter__(self) -> "RefreshClock":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
