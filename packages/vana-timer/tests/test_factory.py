"""Tests for vana_timer.factory - timers from user input."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from vana_calendar import MoonDirection, Weekday
from vana_schedule import LabeledTarget
from vana_timer import (
    InvalidInputError,
    TimerKind,
    new_earth_timer,
    new_moon_step_timer,
    new_nm_lottery_timer,
    new_nm_timed_window_timer,
    new_preset_timer,
    new_weekday_timer,
)

UTC = timezone.utc
NOW = int(datetime(2024, 5, 1, 12, 0, tzinfo=UTC).timestamp()) * 1000
DAY = 86_400_000


class TestWeekdayTimer:
    """Creating in-game weekday timers."""

    def test_fields(self) -> None:
        timer = new_weekday_timer("  Bazaar ", "Iceday", 7, 30, now_ms=NOW)
        assert timer.kind is TimerKind.VANA_WEEKDAY_TIME
        assert timer.label == "Bazaar"
        assert timer.target_weekday is Weekday.ICEDAY
        assert (timer.target_hour, timer.target_minute) == (7, 30)
        assert timer.enabled is True
        assert timer.created_at_ms == NOW

    def test_defaults_and_clamps(self) -> None:
        timer = new_weekday_timer("", Weekday.FIRESDAY, 40, -5, now_ms=NOW)
        assert timer.label == "Timer"
        assert (timer.target_hour, timer.target_minute) == (23, 0)

    def test_ids_are_unique(self) -> None:
        a = new_weekday_timer("", Weekday.FIRESDAY, 0, 0, now_ms=NOW)
        b = new_weekday_timer("", Weekday.FIRESDAY, 0, 0, now_ms=NOW)
        assert a.id != b.id

    def test_bad_weekday(self) -> None:
        with pytest.raises(InvalidInputError):
            new_weekday_timer("", "Sunday", 0, 0, now_ms=NOW)


class TestEarthTimer:
    """Creating daily real-world timers."""

    def test_future_time_kept(self) -> None:
        timer = new_earth_timer("", "2024-05-01T13:00", now_ms=NOW, tz=UTC)
        assert timer.label == "Real Life Timer"
        assert timer.target_earth_ms == NOW + 3_600_000
        assert timer.raw_input == "2024-05-01T13:00"

    def test_past_time_rolls_to_next_day(self) -> None:
        """A time already passed today is set for tomorrow."""
        timer = new_earth_timer("Reset", "2024-05-01T11:00", now_ms=NOW, tz=UTC)
        assert timer.target_earth_ms == NOW - 3_600_000 + DAY

    def test_invalid(self) -> None:
        with pytest.raises(InvalidInputError):
            new_earth_timer("", "whenever", now_ms=NOW)


class TestMoonStepTimer:
    """Creating moon timers from direction and percent."""

    def test_waning_label(self) -> None:
        timer = new_moon_step_timer("Fishing", MoonDirection.WANING, 50, now_ms=NOW)
        assert timer.target_moon_step == 150
        assert timer.label == "Fishing (▼ WANING 50%, Last Quarter, step 150)"

    def test_full_moon_defaults(self) -> None:
        timer = new_moon_step_timer("", "WAXING", 100, now_ms=NOW)
        assert timer.target_moon_step == 100
        assert timer.label == "Moon Timer (▼ WANING 100%, Full Moon, step 100)"

    def test_percent_is_clamped(self) -> None:
        timer = new_moon_step_timer("", "WAXING", 250, now_ms=NOW)
        assert timer.target_moon_step == 100

    def test_bad_direction(self) -> None:
        with pytest.raises(InvalidInputError):
            new_moon_step_timer("", "SIDEWAYS", 10, now_ms=NOW)


class TestNmTimers:
    """Creating timed-window and lottery NM timers."""

    def test_timed_window_defaults(self) -> None:
        timer = new_nm_timed_window_timer("", now_ms=NOW)
        assert timer.label == "NM Timer"
        assert timer.base_earth_ms == NOW
        assert timer.window_start_offset_ms == 7_200_000
        assert timer.window_end_offset_ms == 9_000_000
        assert timer.interval_ms == 300_000
        assert timer.warn_lead_ms == 10_000

    def test_timed_window_tod(self) -> None:
        timer = new_nm_timed_window_timer("KV", now_ms=NOW, tod="2024-05-01 10:00", tz=UTC)
        assert timer.base_earth_ms == NOW - 2 * 3_600_000

    def test_unparseable_warn_lead_defaults(self) -> None:
        """A warn lead that cannot be parsed falls back to 10 s."""
        timer = new_nm_timed_window_timer("", now_ms=NOW, warn_lead="soon")
        assert timer.warn_lead_ms == 10_000

    def test_interval_minimum(self) -> None:
        timer = new_nm_timed_window_timer("", now_ms=NOW, interval="0s")
        assert timer.interval_ms == 1_000

    def test_end_before_start_rejected(self) -> None:
        """A window closing before it opens is invalid input."""
        with pytest.raises(InvalidInputError, match="window end"):
            new_nm_timed_window_timer("", now_ms=NOW, window_start="3h", window_end="2h")

    @pytest.mark.parametrize("field", ["window_start", "window_end", "interval"])
    def test_invalid_duration_rejected(self, field: str) -> None:
        with pytest.raises(InvalidInputError):
            new_nm_timed_window_timer("", now_ms=NOW, **{field: "abc"})

    def test_invalid_tod_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="ToD"):
            new_nm_timed_window_timer("", now_ms=NOW, tod="yesterday-ish")

    def test_lottery_defaults(self) -> None:
        timer = new_nm_lottery_timer("", now_ms=NOW)
        assert timer.label == "Lottery NM"
        assert timer.window_start_offset_ms == 6_355_000
        assert timer.ph_respawn_ms == 300_000
        assert timer.ph_next_at_ms is None

    def test_lottery_respawn_minimum(self) -> None:
        timer = new_nm_lottery_timer("", now_ms=NOW, ph_respawn="0:00")
        assert timer.ph_respawn_ms == 1_000

    def test_lottery_invalid(self) -> None:
        with pytest.raises(InvalidInputError):
            new_nm_lottery_timer("", now_ms=NOW, window_open="later")


class TestPresetTimer:
    """Creating weekday timers from resolved presets."""

    def test_label_and_target(self) -> None:
        target = LabeledTarget(weekday=Weekday.EARTHSDAY, hour=3, minute=5, label="Cooking Guild")
        timer = new_preset_timer(target, 2, now_ms=NOW)
        assert timer.label == "Cooking Guild (offset 2h) - Earthsday 03:05"
        assert timer.target_weekday is Weekday.EARTHSDAY
        assert (timer.target_hour, timer.target_minute) == (3, 5)
