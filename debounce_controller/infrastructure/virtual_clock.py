"""Simulated clock for driving debounce controllers deterministically."""

import heapq
import itertools
from collections.abc import Callable


class VirtualTimer:
    """Handle for a callback queued on a `VirtualScheduler`."""

    def __init__(self, due_time: float, callback: Callable[[], None]) -> None:
        self.due_time = due_time
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """Scheduler whose time only moves when `advance()` is called.

    Timers due at the same instant fire in the order they were scheduled.
    A timer due at time t fires before any call the test makes at t, since
    `advance()` drains everything due up to and including its target first.
    Callback exceptions propagate to the caller of `advance()`.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, VirtualTimer]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.due_time, next(self._sequence), timer))
        return timer

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every timer that comes due on the way."""
        if seconds < 0:
            raise ValueError("Cannot move a virtual clock backwards")
        self._run_until(self._now + seconds)

    def advance_to(self, when: float) -> None:
        """Advance to an absolute time."""
        if when < self._now:
            raise ValueError("Cannot move a virtual clock backwards")
        self._run_until(when)

    def _run_until(self, target: float) -> None:
        while True:
            timer = self._pop_due(target)
            if timer is None:
                break
            self._now = timer.due_time
            timer.callback()
        self._now = target

    def run_all(self) -> None:
        """Fire timers until none remain, moving time to each due time."""
        while self.pending_count:
            self._discard_cancelled()
            self.advance_to(max(self._queue[0][0], self._now))

    @property
    def pending_count(self) -> int:
        """Return the number of timers that are queued and not cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def _pop_due(self, target: float) -> VirtualTimer | None:
        self._discard_cancelled()
        if self._queue and self._queue[0][0] <= target:
            return heapq.heappop(self._queue)[2]
        return None

    def _discard_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
