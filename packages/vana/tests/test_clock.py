"""Tests for the loop clock and tick baseline."""
from __future__ import annotations

import pytest

from vana import Clock, effective_previous_tick, wall_clock_ms


class TestEffectivePreviousTick:
    """Where each tick's due-check window starts."""

    def test_first_tick(self) -> None:
        assert effective_previous_tick(None, 5_000, 300_000) == 5_000

    def test_normal_gap(self) -> None:
        assert effective_previous_tick(4_750, 5_000, 300_000) == 4_750

    def test_gap_at_cap_is_kept(self) -> None:
        assert effective_previous_tick(0, 300_000, 300_000) == 0

    def test_long_gap_is_capped(self) -> None:
        """After a long sleep only the last five minutes are scanned."""
        assert effective_previous_tick(0, 1_000_000, 300_000) == 700_000

    def test_backward_jump(self) -> None:
        """A clock moved backwards scans from now."""
        assert effective_previous_tick(9_000, 5_000, 300_000) == 5_000


class TestClock:
    """Loop clock counters and time source."""

    def test_defaults(self) -> None:
        clock = Clock()
        assert clock.tick_interval_ms == 250
        assert clock.dt == 0.25
        assert clock.tick_number == 0

    def test_advance_and_reset(self) -> None:
        clock = Clock()
        assert clock.advance() == 1
        assert clock.advance() == 2
        clock.reset(10)
        assert clock.tick_number == 10

    def test_injected_source(self) -> None:
        assert Clock(source=lambda: 1234).now_ms() == 1234

    def test_wall_clock(self) -> None:
        assert abs(Clock().now_ms() - wall_clock_ms()) < 5_000

    @pytest.mark.parametrize("interval", [0, -250])
    def test_interval_must_be_positive(self, interval: int) -> None:
        with pytest.raises(ValueError):
            Clock(interval)
