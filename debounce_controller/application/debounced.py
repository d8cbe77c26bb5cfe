"""Debounce controller: coalesce bursts of calls into bounded executions."""

import functools
import threading
from collections.abc import Callable
from typing import Any

from debounce_controller.domain.models import DebounceOptions, DebounceState, PendingTimer
from debounce_controller.infrastructure.scheduler import Scheduler, ThreadingScheduler
from debounce_controller.logging_config import get_logger

logger = get_logger(__name__)

# (args, kwargs, caller context) of the call chosen for execution
_PendingCall = tuple[tuple[Any, ...], dict[str, Any], Any]


class Debounced:
    """Callable proxy that defers and coalesces calls to `func`.

    Each call records its arguments as the pending call and returns the
    result of the most recent actual execution. Executions happen on the
    leading edge of a window, on the trailing edge when the window's timer
    fires, when `max_wait` forces progress, or when `flush()` is called.

    Accessed through an instance (as a method), the proxy binds that
    instance as the caller context and passes it as the first argument at
    execution time. All receivers share one scheduling state.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        options: DebounceOptions,
        scheduler: Scheduler,
    ) -> None:
        self._func = func
        self._options = options
        self._scheduler = scheduler
        self._state = DebounceState()
        self._lock = threading.Lock()
        self._name = getattr(func, "__qualname__", repr(func))
        functools.update_wrapper(self, func, updated=())

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._call(None, args, kwargs)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return BoundDebounced(self, instance)

    def __repr__(self) -> str:
        return f"<Debounced {self._name} wait={self._options.wait}>"

    @property
    def options(self) -> DebounceOptions:
        return self._options

    @property
    def pending(self) -> bool:
        """Return whether a trailing-edge timer is outstanding."""
        with self._lock:
            return self._state.timer is not None

    @property
    def last_result(self) -> Any:
        with self._lock:
            return self._state.last_result

    def cancel(self) -> None:
        """Drop the pending call and start the next call in a fresh window."""
        with self._lock:
            state = self._state
            had_timer = state.timer is not None
            self._cancel_timer()
            state.clear_pending()
            state.last_invoke_time = None
            state.window_start_time = None
        if had_timer:
            logger.debug("Debounce cancelled for: %s", self._name)

    def flush(self) -> Any:
        """Run the pending trailing execution now and return its result.

        With no timer outstanding this returns the last stored result
        without executing anything.
        """
        with self._lock:
            if self._state.timer is None:
                return self._state.last_result
            self._cancel_timer()
            logger.debug("Debounce flushed for: %s", self._name)
            call = self._trailing_edge(self._scheduler.now())
            if call is None:
                return self._state.last_result
        return self._execute(call)

    def _call(self, context: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        options = self._options
        call: _PendingCall | None = None
        with self._lock:
            state = self._state
            now = self._scheduler.now()
            state.record_call(args, kwargs, context, now)

            max_wait_elapsed = self._max_wait_elapsed(now)
            if state.last_invoke_time is None or max_wait_elapsed:
                if state.timer is None:
                    state.window_start_time = now
                    logger.debug("Debounce window opened for: %s", self._name)
                    if options.leading:
                        call = self._take_call(now)
                    self._start_timer(now)
                elif options.max_wait is not None:
                    if max_wait_elapsed and options.trailing:
                        logger.debug("Max wait reached for: %s", self._name)
                        call = self._take_call(now)
                    self._start_timer(now)
            elif state.timer is None:
                self._start_timer(now)

            if call is None:
                return state.last_result
        return self._execute(call)

    def _anchor_time(self) -> float | None:
        """Return the instant `max_wait` is measured from."""
        state = self._state
        if state.last_invoke_time is not None:
            return state.last_invoke_time
        return state.window_start_time

    def _max_wait_elapsed(self, now: float) -> bool:
        max_wait = self._options.max_wait
        if max_wait is None:
            return False
        anchor = self._anchor_time()
        return anchor is not None and now - anchor >= max_wait

    def _start_timer(self, now: float) -> None:
        """(Re)start the single trailing-edge timer."""
        delay = self._options.wait
        anchor = self._anchor_time()
        if self._options.max_wait is not None and anchor is not None:
            # never fire later than the max-wait deadline
            delay = min(delay, max(anchor + self._options.max_wait - now, 0.0))

        self._cancel_timer()
        timer = PendingTimer(due_time=now + delay)
        self._state.timer = timer
        timer.handle = self._scheduler.call_later(
            delay, functools.partial(self._timer_expired, timer)
        )

    def _cancel_timer(self) -> None:
        timer = self._state.timer
        if timer is None:
            return
        self._state.timer = None
        if timer.handle is not None:
            timer.handle.cancel()

    def _timer_expired(self, timer: PendingTimer) -> None:
        with self._lock:
            if self._state.timer is not timer:
                # superseded by a restart, cancel or flush
                return
            call = self._trailing_edge(self._scheduler.now())
        if call is None:
            return
        try:
            self._execute(call)
        except Exception:
            logger.exception("Debounced execution failed for: %s", self._name)
            raise

    def _trailing_edge(self, now: float) -> _PendingCall | None:
        """Close the window; return the call to execute, if any. Lock held."""
        state = self._state
        state.timer = None
        if self._options.trailing and state.has_pending:
            return self._take_call(now)
        state.clear_pending()
        return None

    def _take_call(self, now: float) -> _PendingCall:
        """Mark an execution at `now` and hand over the pending call. Lock held."""
        self._state.last_invoke_time = now
        return self._state.take_pending()

    def _execute(self, call: _PendingCall) -> Any:
        """Run the action outside the lock and store its result."""
        args, kwargs, context = call
        logger.debug("Debounce fired for: %s", self._name)
        if context is None:
            result = self._func(*args, **kwargs)
        else:
            result = self._func(context, *args, **kwargs)
        with self._lock:
            self._state.last_result = result
        return result


class BoundDebounced:
    """A `Debounced` proxy bound to a caller context (its receiver)."""

    def __init__(self, debounced: Debounced, context: Any) -> None:
        self._debounced = debounced
        self._context = context
        functools.update_wrapper(self, debounced._func, updated=())

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._debounced._call(self._context, args, kwargs)

    def __repr__(self) -> str:
        return f"<bound {self._debounced!r} of {self._context!r}>"

    @property
    def options(self) -> DebounceOptions:
        return self._debounced.options

    @property
    def pending(self) -> bool:
        return self._debounced.pending

    @property
    def last_result(self) -> Any:
        return self._debounced.last_result

    def cancel(self) -> None:
        self._debounced.cancel()

    def flush(self) -> Any:
        return self._debounced.flush()


def debounce(
    func: Callable[..., Any] | None = None,
    wait: float | None = None,
    *,
    leading: bool | None = None,
    trailing: bool | None = None,
    max_wait: float | None = None,
    options: DebounceOptions | None = None,
    scheduler: Scheduler | None = None,
) -> Any:
    """Wrap `func` in a debounce controller.

    Usable directly, ``debounce(save, 0.5, max_wait=2)``, or as a decorator,
    ``@debounce(wait=0.5)``. Durations are in seconds. Negative durations
    raise `pydantic.ValidationError`.

    Args:
        func: Action to debounce. Omit to get a decorator.
        wait: Delay before the trailing execution.
        leading: Execute on the call that opens a window.
        trailing: Execute when the window's timer fires. Defaults to True.
        max_wait: Upper bound on how long calls can defer an execution.
        options: Pre-built settings; exclusive with the four above.
        scheduler: Clock and timer source. Defaults to `ThreadingScheduler`.

    Returns:
        A `Debounced` proxy exposing `cancel()` and `flush()`, or a
        decorator producing one.
    """
    if func is not None and not callable(func):
        raise TypeError("debounce() expects a callable; pass wait= by keyword")

    overrides = {
        key: value
        for key, value in {
            "wait": wait,
            "leading": leading,
            "trailing": trailing,
            "max_wait": max_wait,
        }.items()
        if value is not None
    }
    if options is None:
        options = DebounceOptions(**overrides)
    elif overrides:
        raise TypeError("Pass either options= or individual settings, not both")

    def decorator(target: Callable[..., Any]) -> Debounced:
        return Debounced(target, options, scheduler or ThreadingScheduler())

    if func is None:
        return decorator
    return decorator(func)
