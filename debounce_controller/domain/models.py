from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from debounce_controller.domain.constants import DEFAULT_WAIT_SECONDS


class TimerHandle(Protocol):
    """A deferred callback that can still be withdrawn."""

    def cancel(self) -> None: ...


# --- Configuration ---


class DebounceOptions(BaseModel):
    """Settings for one debounce controller. Durations are in seconds."""

    model_config = ConfigDict(frozen=True)

    wait: float = Field(default=DEFAULT_WAIT_SECONDS, ge=0)
    leading: bool = False
    trailing: bool = True
    max_wait: float | None = Field(default=None, ge=0)


# --- Scheduling State ---


@dataclass
class PendingTimer:
    """The single outstanding trailing-edge task of a controller."""

    due_time: float
    handle: TimerHandle | None = None


@dataclass
class DebounceState:
    """Mutable scheduling state, owned by exactly one controller."""

    timer: PendingTimer | None = None
    pending_args: tuple[Any, ...] | None = None
    pending_kwargs: dict[str, Any] | None = None
    pending_context: Any = None
    has_pending: bool = False
    last_call_time: float | None = None
    last_invoke_time: float | None = None  # None means "never invoked"
    window_start_time: float | None = None
    last_result: Any = field(default=None)

    def record_call(
        self, args: tuple[Any, ...], kwargs: dict[str, Any], context: Any, now: float
    ) -> None:
        """Remember the latest call so the next execution uses it."""
        self.pending_args = args
        self.pending_kwargs = kwargs
        self.pending_context = context
        self.has_pending = True
        self.last_call_time = now

    def take_pending(self) -> tuple[tuple[Any, ...], dict[str, Any], Any]:
        """Return the pending call and drop every reference to it."""
        args = self.pending_args or ()
        kwargs = self.pending_kwargs or {}
        context = self.pending_context
        self.clear_pending()
        return args, kwargs, context

    def clear_pending(self) -> None:
        self.pending_args = None
        self.pending_kwargs = None
        self.pending_context = None
        self.has_pending = False
