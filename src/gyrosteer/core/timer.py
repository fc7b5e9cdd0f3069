"""Drift-corrected periodic timer running on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTimer:
    """
    Call ``callback`` every ``interval_s`` seconds on the running event loop.

    Each target time is the previous *target* plus one period, so small
    scheduling errors do not accumulate. The first call happens one period
    after :meth:`start`. Callbacks run to completion before the next one is
    scheduled; exceptions are logged and the timer keeps going.
    """

    def __init__(
        self,
        interval_s: float,
        callback: Callable[[], None],
        *,
        name: str = "gyrosteer-timer",
    ) -> None:
        if interval_s <= 0.0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self.interval_s = float(interval_s)
        self.name = name
        self.overruns = 0
        self.ticks = 0
        self._callback = callback
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the timer; must be called from inside a running loop."""
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self.name)

    def stop(self) -> None:
        """Cancel the timer. No further callbacks fire after this returns."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        period = self.interval_s
        next_t = loop.time()
        while True:
            next_t += period
            delay = next_t - loop.time()
            if delay < -period:
                # Fell more than a period behind; resync instead of bursting.
                self.overruns += 1
                logger.debug("%s overran by %.3f s", self.name, -delay)
                next_t = loop.time()
                delay = 0.0
            await asyncio.sleep(max(0.0, delay))
            self.ticks += 1
            try:
                self._callback()
            except Exception:
                logger.exception("%s callback failed", self.name)
