"""Deferred-callback schedulers that debounce controllers run on."""

import asyncio
import threading
import time
from collections.abc import Callable
from typing import Protocol

from debounce_controller.domain.models import TimerHandle
from debounce_controller.logging_config import get_logger

logger = get_logger(__name__)


class Scheduler(Protocol):
    """Clock plus "run this after a delay" capability."""

    def now(self) -> float:
        """Return the current time in seconds."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run `callback` once after `delay` seconds."""
        ...


class ThreadingScheduler:
    """Schedule callbacks on daemon `threading.Timer` threads.

    Exceptions raised by a callback surface through `threading.excepthook`.
    """

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop.

    Must be used from the loop's own thread. Exceptions raised by a callback
    are reported through the loop's exception handler.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
            logger.debug("AsyncioScheduler bound to running loop")
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self.loop.call_later(delay, callback)
