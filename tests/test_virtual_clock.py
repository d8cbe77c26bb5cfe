from unittest.mock import MagicMock

import pytest

from debounce_controller.infrastructure.virtual_clock import VirtualScheduler


class TestVirtualScheduler:
    def test_advance_should_fire_due_callbacks_in_order(self) -> None:
        clock = VirtualScheduler()
        fired: list[tuple[str, float]] = []

        clock.call_later(2.0, lambda: fired.append(("late", clock.now())))
        clock.call_later(1.0, lambda: fired.append(("early", clock.now())))
        clock.call_later(1.0, lambda: fired.append(("early-2", clock.now())))
        clock.advance(5.0)

        assert fired == [("early", 1.0), ("early-2", 1.0), ("late", 2.0)]
        assert clock.now() == 5.0

    def test_callback_should_not_fire_before_due_time(self) -> None:
        clock = VirtualScheduler(start=10.0)
        callback = MagicMock()

        clock.call_later(1.0, callback)
        clock.advance(0.5)

        callback.assert_not_called()
        assert clock.pending_count == 1

    def test_cancelled_timer_should_not_fire(self) -> None:
        clock = VirtualScheduler()
        callback = MagicMock()

        handle = clock.call_later(1.0, callback)
        handle.cancel()
        clock.advance(2.0)

        callback.assert_not_called()
        assert clock.pending_count == 0

    def test_callbacks_scheduled_while_advancing_should_fire_if_due(self) -> None:
        clock = VirtualScheduler()
        fired: list[float] = []

        def chain() -> None:
            fired.append(clock.now())
            if len(fired) < 3:
                clock.call_later(1.0, chain)

        clock.call_later(1.0, chain)
        clock.advance(10.0)

        assert fired == [1.0, 2.0, 3.0]

    def test_run_all_should_drain_queue(self) -> None:
        clock = VirtualScheduler()
        callback = MagicMock()

        clock.call_later(3.0, callback)
        clock.call_later(7.0, callback)
        clock.run_all()

        assert callback.call_count == 2
        assert clock.now() == 7.0

    def test_moving_backwards_should_raise(self) -> None:
        clock = VirtualScheduler(start=5.0)

        with pytest.raises(ValueError):
            clock.advance(-1.0)
        with pytest.raises(ValueError):
            clock.advance_to(4.0)

    def test_callback_exception_should_propagate_to_advance(self) -> None:
        clock = VirtualScheduler()
        clock.call_later(1.0, MagicMock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError):
            clock.advance(2.0)

        assert clock.pending_count == 0
