"""
Cancellable repeating timers
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` every ``interval`` seconds until the handle is cancelled"""
        ...


class RepeatingTimer:
    """Repeating timer on an asyncio event loop.

    Each tick schedules the next one, so cancelling stops it between ticks
    and no callback runs after ``cancel()`` returns.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> "RepeatingTimer":
        self._handle = self._loop.call_later(self._interval, self._fire)
        return self

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = None
        try:
            self._callback()
        except Exception:
            logger.exception("Timer callback failed")
            self.cancel()
            return
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval, self._fire)


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> RepeatingTimer:
        loop = self._loop or asyncio.get_running_loop()
        return RepeatingTimer(loop, interval, callback).start()
