"""Tests for vana_store.persist - app state load/save."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vana_calendar import DEFAULT_CALIBRATION, Calibration, Weekday
from vana_store import (
    CALIBRATION_KEY,
    PRESET_OFFSET_KEY,
    TIMERS_KEY,
    JsonFileStore,
    MemoryStore,
    PersistedState,
    load_state,
    save_state,
)
from vana_timer import NmLotteryTimer, WeekdayTimer


def _state() -> PersistedState:
    return PersistedState(
        calibration=Calibration(time_offset_ms=-4000, new_moon_start_earth_ms=1_700_000_000_000),
        timers=(
            WeekdayTimer(
                id="a",
                label="Guild",
                target_weekday=Weekday.DARKSDAY,
                target_hour=5,
                target_minute=0,
            ),
            NmLotteryTimer(
                id="b",
                label="Lotto",
                base_earth_ms=10,
                window_start_offset_ms=20,
                ph_respawn_ms=300_000,
                ph_next_at_ms=99,
            ),
        ),
        preset_offset_hours=5,
    )


class TestLoadState:
    """Reading app state with defaults for missing or bad values."""

    def test_empty_store_gives_defaults(self) -> None:
        state = load_state(MemoryStore())
        assert state.calibration == DEFAULT_CALIBRATION
        assert state.timers == ()
        assert state.preset_offset_hours == 2

    def test_null_calibration_falls_back(self) -> None:
        """A stored null calibration means the default."""
        state = load_state(MemoryStore({CALIBRATION_KEY: None}))
        assert state.calibration == DEFAULT_CALIBRATION

    def test_malformed_calibration_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="vana_store.persist"):
            state = load_state(MemoryStore({CALIBRATION_KEY: {"timeOffsetMs": "soon"}}))
        assert state.calibration == DEFAULT_CALIBRATION
        assert "calibration" in caplog.text

    def test_missing_moon_anchor(self) -> None:
        state = load_state(MemoryStore({CALIBRATION_KEY: {"timeOffsetMs": 120}}))
        assert state.calibration == Calibration(time_offset_ms=120, new_moon_start_earth_ms=0)

    def test_offset_is_clamped(self) -> None:
        assert load_state(MemoryStore({PRESET_OFFSET_KEY: 99})).preset_offset_hours == 23

    def test_malformed_offset(self) -> None:
        assert load_state(MemoryStore({PRESET_OFFSET_KEY: "x"})).preset_offset_hours == 2

    def test_bad_timer_records_are_skipped(self) -> None:
        """Undecodable timers are dropped, the rest load."""
        store = MemoryStore({TIMERS_KEY: [{"kind": "NOPE"}]})
        assert load_state(store).timers == ()


class TestSaveState:
    """Writing app state under its storage keys."""

    def test_round_trip_memory(self) -> None:
        store = MemoryStore()
        assert save_state(store, _state())
        assert load_state(store) == _state()

    def test_round_trip_file(self, tmp_path: Path) -> None:
        path = tmp_path / "vana.json"
        assert save_state(JsonFileStore(path), _state())
        assert load_state(JsonFileStore(path)) == _state()

    def test_stored_shape(self) -> None:
        store = MemoryStore()
        save_state(store, _state())
        assert store.load(CALIBRATION_KEY) == {
            "timeOffsetMs": -4000,
            "newMoonStartEarthMs": 1_700_000_000_000,
        }
        assert store.load(TIMERS_KEY)[0]["targetWeekday"] == "Darksday"
        assert store.load(PRESET_OFFSET_KEY) == 5
