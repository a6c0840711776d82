"""
Fixed-timer auto-refresh.

Re-runs a view's fetch on a fixed interval. Ticks are fire-and-forget: a
failed tick is logged and the next one runs on schedule. Views pause the
timer while a mutation is in flight.
"""

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class AutoRefresher:
    """
    Coroutine sleep loop calling ``callback`` every ``interval_seconds``.

    pause() / resume() nest, so overlapping mutations keep the timer paused
    until the last one finishes.
    """

    def __init__(self, callback: Callable[[], Awaitable[Any]], interval_seconds: float, name: str = "auto-refresh"):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.callback = callback
        self.interval_seconds = interval_seconds
        self.name = name
        self._pause_depth = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_paused(self) -> bool:
        return self._pause_depth > 0

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug("%s started (every %.1fs)", self.name, self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.debug("%s stopped", self.name)

    def pause(self) -> None:
        self._pause_depth += 1

    def resume(self) -> None:
        if self._pause_depth > 0:
            self._pause_depth -= 1

    @contextlib.contextmanager
    def paused(self):
        self.pause()
        try:
            yield self
        finally:
            self.resume()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            if self.is_paused:
                logger.debug("%s tick skipped while paused", self.name)
                continue
            try:
                await self.callback()
            except Exception:
                logger.exception("%s tick failed", self.name)
