import pytest

from debounce_controller.infrastructure.virtual_clock import VirtualScheduler
from tests.fixtures.action_recorder import ActionRecorder


@pytest.fixture()
def clock() -> VirtualScheduler:
    """Provide a simulated clock starting at t=0."""
    return VirtualScheduler()


@pytest.fixture()
def action(clock: VirtualScheduler) -> ActionRecorder:
    """Provide an action that records when and with what it ran."""
    return ActionRecorder(clock)
