"""Tests for Engine: delivery, lifecycle, persistence and snapshots."""
from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from vana import (
    AddTimer,
    ClockConfig,
    DismissTimer,
    Engine,
    KeepAwake,
    Notify,
    SchedulerState,
    SetPresetOffset,
    SnapshotError,
    StopNotification,
)
from vana_calendar import Calibration, Weekday
from vana_signal import Notification, RecordingKeepAwake, RecordingNotifier, connect_notifier
from vana_store import TIMERS_KEY, MemoryStore
from vana_timer import MoonStepTimer, WeekdayTimer

ZERO = Calibration()


def _weekday(timer_id: str = "wd") -> WeekdayTimer:
    return WeekdayTimer(
        id=timer_id,
        label="Guild",
        target_weekday=Weekday.FIRESDAY,
        target_hour=0,
        target_minute=1,
    )


def _engine(*timers, **kwargs) -> tuple[Engine, RecordingNotifier, RecordingKeepAwake]:
    state = SchedulerState(timers=tuple(timers), calibration=ZERO)
    engine = Engine(state=state, **kwargs)
    notifier = RecordingNotifier()
    keep_awake = RecordingKeepAwake()
    connect_notifier(engine.bus, notifier, keep_awake)
    return engine, notifier, keep_awake


class TestStep:
    """Single ticks delivered through the bus."""

    def test_notifications_reach_the_notifier(self) -> None:
        engine, notifier, keep_awake = _engine(_weekday())
        engine.step(2_000)
        effects = engine.step(2_500)

        assert [type(e) for e in effects] == [Notify]
        assert notifier.notifications == [
            Notification("wd", "FFXI Timer", "Guild is due now! (click to stop)", True)
        ]
        assert keep_awake.states == [True]
        assert engine.clock.tick_number == 2

    def test_uses_injected_now(self) -> None:
        times = iter([2_000, 2_500])
        engine, notifier, _ = _engine(_weekday(), now_fn=lambda: next(times))
        engine.step()
        engine.step()
        assert len(notifier.notifications) == 1
        assert engine.state.last_tick_ms == 2_500

    def test_failing_notifier_does_not_break_the_tick(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A raising handler is logged and the tick completes."""
        engine = Engine(state=SchedulerState(timers=(_weekday(),), calibration=ZERO))

        def broken(signal_name: str, data: dict) -> None:
            raise OSError("no display")

        engine.bus.subscribe("timer_notify", broken)
        engine.step(2_000)
        with caplog.at_level(logging.ERROR, logger="vana_signal.bus"):
            effects = engine.step(2_500)

        assert len(effects) == 1
        assert engine.state.last_fired == {("wd", "due"): 2_500}
        assert "timer_notify" in caplog.text


class TestDispatch:
    """User actions and their stop and keep-awake effects."""

    def test_dismiss_stops_notification_and_keep_awake(self) -> None:
        engine, notifier, keep_awake = _engine(_weekday())
        engine.step(0)
        effects = engine.dispatch(DismissTimer("wd"))

        assert effects == [StopNotification("wd"), KeepAwake(False)]
        assert notifier.stopped == ["wd"]
        assert keep_awake.states == [True, False]
        assert engine.state.timers[0].enabled is False

    def test_add_turns_keep_awake_on(self) -> None:
        engine, _, keep_awake = _engine()
        engine.step(0)
        engine.dispatch(AddTimer(_weekday()))
        assert keep_awake.states == [False, True]

    def test_unknown_action(self) -> None:
        engine, _, _ = _engine()
        with pytest.raises(TypeError):
            engine.dispatch(object())


class TestLifecycle:
    """Paced runs with start and stop hooks."""

    def test_run_calls_hooks_and_paces(self) -> None:
        """Hooks bracket the run and each tick sleeps off its remainder."""
        times = iter(range(0, 10_000, 250))
        engine, _, _ = _engine(now_fn=lambda: next(times))
        calls = []
        engine.on_start(lambda e: calls.append(("start", e.clock.tick_number)))
        engine.on_stop(lambda e: calls.append(("stop", e.clock.tick_number)))

        with patch("vana.engine.time.sleep") as sleep:
            engine.run(3)

        assert calls == [("start", 0), ("stop", 3)]
        assert sleep.call_count == 3
        assert all(0 < c.args[0] <= 0.25 for c in sleep.call_args_list)

    def test_run_forever_until_stop(self) -> None:
        ticks = []

        def now() -> int:
            ticks.append(engine.clock.tick_number)
            if len(ticks) == 4:
                engine.request_stop()
            return len(ticks) * 250

        engine = Engine(state=SchedulerState(calibration=ZERO), now_fn=now)
        stopped = []
        engine.on_stop(lambda e: stopped.append(e.clock.tick_number))

        with patch("vana.engine.time.sleep") as sleep:
            engine.run_forever()

        assert stopped == [4]
        assert sleep.call_count == 3

    def test_request_stop_in_start_hook(self) -> None:
        engine, _, _ = _engine(now_fn=lambda: 0)
        engine.on_start(lambda e: e.request_stop())
        with patch("vana.engine.time.sleep"):
            engine.run(5)
        assert engine.clock.tick_number == 0

    def test_tick_interval_from_config(self) -> None:
        engine = Engine(config=ClockConfig(tick_interval_ms=1_000))
        assert engine.clock.dt == 1.0


class FlakyStore(MemoryStore):
    """Memory store whose first ``failures`` saves report an I/O error."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    def save(self, key: str, value: object) -> bool:
        if self.failures > 0:
            self.failures -= 1
            return False
        return super().save(key, value)


class TestPersistence:
    """Saving to the store on change."""

    def test_changes_are_saved(self) -> None:
        store = MemoryStore()
        engine = Engine.from_store(store)
        engine.dispatch(AddTimer(_weekday()))
        engine.dispatch(SetPresetOffset(4))

        assert store.load(TIMERS_KEY)[0]["id"] == "wd"
        reloaded = Engine.from_store(store)
        assert reloaded.state.timers == (_weekday(),)
        assert reloaded.state.preset_offset_hours == 4

    def test_unchanged_ticks_do_not_save(self) -> None:
        """Ticks that change nothing persistent write nothing."""
        store = MemoryStore()
        engine = Engine.from_store(store)
        with patch("vana.engine.save_state") as save:
            engine.step(0)
            engine.step(250)
        save.assert_not_called()

    def test_failed_save_is_retried_on_next_tick(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A change the store rejected is written once the store recovers."""
        store = FlakyStore(failures=3)
        engine = Engine.from_store(store)
        with caplog.at_level(logging.WARNING, logger="vana.engine"):
            engine.dispatch(AddTimer(_weekday()))
        assert store.load(TIMERS_KEY, []) == []
        assert "failed" in caplog.text

        engine.step(1_000)
        engine.step(1_250)
        assert store.load(TIMERS_KEY, [])[0]["id"] == "wd"
        assert Engine.from_store(store).state.timers == (_weekday(),)


class TestSnapshot:
    """Versioned snapshot and restore."""

    def test_round_trip(self) -> None:
        engine, _, _ = _engine(_weekday(), MoonStepTimer(id="m", label="M", target_moon_step=3))
        engine.step(2_000)
        engine.step(2_500)
        snap = json.loads(json.dumps(engine.snapshot()))

        other = Engine()
        other.restore(snap)
        assert other.state == engine.state
        assert other.clock.tick_number == 2

    def test_wrong_version(self) -> None:
        snap = Engine().snapshot()
        snap["version"] = 99
        with pytest.raises(SnapshotError, match="version"):
            Engine().restore(snap)

    def test_malformed(self) -> None:
        snap = Engine().snapshot()
        del snap["timers"]
        with pytest.raises(SnapshotError, match="Malformed"):
            Engine().restore(snap)
