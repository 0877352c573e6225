"""Recurring tick scheduler on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

log = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[bool]]


class TickScheduler:
    """Calls an async callback every *interval* seconds until stopped.

    The callback returns True to keep ticking and False to stop. ``stop()``
    cancels the pending tick; a cancelled loop never calls the callback
    again.
    """

    def __init__(self, interval: float = 1.0) -> None:
        self.interval = interval
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: TickCallback) -> None:
        """Arm the recurring tick. No-op if already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait until the loop ends on its own or is stopped."""
        task = self._task
        if task is None:
            return
        await asyncio.wait({task})
        if not task.cancelled():
            task.result()

    async def _run(self, callback: TickCallback) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                if not await callback():
                    break
        except asyncio.CancelledError:
            log.debug("Tick loop cancelled.")
            raise
