"""
Cancellable delayed callbacks on the running asyncio loop.

    timer = Timer()
    handle = timer.schedule(5.0, fire)
    handle.cancel()   # idempotent, and a no-op once fire() has run

A delay of 0 still goes through loop.call_later, so the callback always
runs on a later loop iteration and can be cancelled until then.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class CancelHandle:
    """Handle to one scheduled callback."""

    def __init__(self) -> None:
        self._timer: asyncio.TimerHandle | None = None
        self._fired = False
        self._cancelled = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._fired or self._cancelled)

    def cancel(self) -> bool:
        """
        Stop the callback from running.

        Returns True only if this call is what prevented it.
        """
        if not self.active:
            return False
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        return True

    def _run(self, callback: Callable[[], None]) -> None:
        if not self.active:
            return
        self._fired = True
        callback()


class Timer:
    """Schedules callbacks after a delay in seconds."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, delay: float, callback: Callable[[], None]) -> CancelHandle:
        loop = self._loop or asyncio.get_running_loop()
        handle = CancelHandle()
        handle._timer = loop.call_later(max(0.0, delay), handle._run, callback)
        logger.debug(f"Scheduled callback in {delay:.3f}s")
        return handle
