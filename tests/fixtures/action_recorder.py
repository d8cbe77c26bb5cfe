"""Recording stand-in for the action wrapped by a debounce controller."""

from typing import Any

from debounce_controller.infrastructure.virtual_clock import VirtualScheduler


class ActionRecorder:
    """Callable that logs each execution together with the virtual time."""

    def __init__(self, clock: VirtualScheduler) -> None:
        self._clock = clock
        self.executions: list[tuple[float, tuple[Any, ...], dict[str, Any]]] = []

    def __call__(self, *args: Any, **kwargs: Any) -> str:
        self.executions.append((self._clock.now(), args, kwargs))
        return f"result:{args[0] if args else None}"

    @property
    def count(self) -> int:
        return len(self.executions)

    @property
    def times(self) -> list[float]:
        return [when for when, _, _ in self.executions]

    @property
    def first_args(self) -> list[Any]:
        return [args[0] if args else None for _, args, _ in self.executions]
