"""Engine - polling loop, pacing, lifecycle hooks and persistence."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from vana_signal import KEEP_AWAKE_SIGNAL, NOTIFY_SIGNAL, STOP_SIGNAL, SignalBus
from vana_store import (
    KeyValueStore,
    PersistedState,
    calibration_from_dict,
    calibration_to_dict,
    load_state,
    save_state,
)
from vana_timer import timer_from_dict, timers_to_list

from vana.clock import Clock
from vana.config import ClockConfig
from vana.state import SchedulerState, apply_action, apply_tick, stopped_timers, sync_keep_awake
from vana.types import Action, Effect, KeepAwake, Notify, SnapshotError, StopNotification

logger = logging.getLogger(__name__)

_SNAPSHOT_VERSION = 1

Hook = Callable[["Engine"], None]


class Engine:
    """Owns the scheduler state and drives it from a clock.

    Effects from each tick or action are published on ``bus`` and flushed
    immediately. When a ``store`` is given, calibration, timers and the
    preset offset are saved whenever they change.
    """

    def __init__(
        self,
        state: SchedulerState | None = None,
        config: ClockConfig | None = None,
        bus: SignalBus | None = None,
        store: KeyValueStore | None = None,
        now_fn: Callable[[], int] | None = None,
    ) -> None:
        self._config = config if config is not None else ClockConfig()
        self._clock = Clock(self._config.tick_interval_ms, now_fn)
        self._state = state if state is not None else SchedulerState()
        self._bus = bus if bus is not None else SignalBus()
        self._store = store
        self._saved = self._persisted()
        self._start_hooks: list[Hook] = []
        self._stop_hooks: list[Hook] = []
        self._stop_requested = False

    @classmethod
    def from_store(cls, store: KeyValueStore, **kwargs: Any) -> Engine:
        """Engine seeded with the state persisted in ``store``."""
        loaded = load_state(store)
        state = SchedulerState(
            timers=loaded.timers,
            calibration=loaded.calibration,
            preset_offset_hours=loaded.preset_offset_hours,
        )
        return cls(state=state, store=store, **kwargs)

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def config(self) -> ClockConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def bus(self) -> SignalBus:
        return self._bus

    def on_start(self, hook: Hook) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Hook) -> None:
        self._stop_hooks.append(hook)

    def request_stop(self) -> None:
        self._stop_requested = True

    # --- Ticking ---

    def step(self, now_ms: int | None = None) -> list[Effect]:
        """Run one tick at ``now_ms`` (default: the clock's time)."""
        self._clock.advance()
        now = now_ms if now_ms is not None else self._clock.now_ms()
        self._state, effects = apply_tick(self._state, now, self._config)
        self._deliver(effects)
        return effects

    def dispatch(self, action: Action) -> list[Effect]:
        """Apply a user action and deliver the effects it implies."""
        before = self._state
        after = apply_action(before, action)
        effects = stopped_timers(before, after)
        self._state, keep_awake = sync_keep_awake(after)
        effects.extend(keep_awake)
        self._deliver(effects)
        return effects

    def _deliver(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Notify):
                self._bus.publish(
                    NOTIFY_SIGNAL,
                    timer_id=effect.timer_id,
                    title=effect.title,
                    body=effect.body,
                    repeat=effect.repeat,
                )
            elif isinstance(effect, KeepAwake):
                self._bus.publish(KEEP_AWAKE_SIGNAL, enabled=effect.enabled)
            elif isinstance(effect, StopNotification):
                self._bus.publish(STOP_SIGNAL, timer_id=effect.timer_id)
        self._bus.flush()
        self._save_if_changed()

    # --- Persistence ---

    def _persisted(self) -> PersistedState:
        return PersistedState(
            calibration=self._state.calibration,
            timers=self._state.timers,
            preset_offset_hours=self._state.preset_offset_hours,
        )

    def _save_if_changed(self) -> None:
        current = self._persisted()
        if current == self._saved:
            return
        if self._store is not None and not save_state(self._store, current):
            logger.warning("Saving timer state failed; will retry on next tick")
            return
        self._saved = current

    # --- Running ---

    def _run_hooks(self, hooks: list[Hook]) -> None:
        for hook in hooks:
            hook(self)

    def _paced_step(self) -> None:
        start = time.monotonic()
        self.step()
        sleep_time = self._clock.dt - (time.monotonic() - start)
        if sleep_time > 0 and not self._stop_requested:
            time.sleep(sleep_time)

    def run(self, n: int) -> None:
        """Run ``n`` paced ticks, bracketed by start/stop hooks."""
        self._stop_requested = False
        logger.info("Engine starting for %d ticks", n)
        self._run_hooks(self._start_hooks)
        for _ in range(n):
            if self._stop_requested:
                break
            self._paced_step()
        self._run_hooks(self._stop_hooks)
        logger.info("Engine stopped after tick %d", self._clock.tick_number)

    def run_forever(self) -> None:
        """Tick every ``tick_interval_ms`` until ``request_stop`` is called."""
        self._stop_requested = False
        logger.info("Engine starting (%d ms ticks)", self._config.tick_interval_ms)
        self._run_hooks(self._start_hooks)
        try:
            while not self._stop_requested:
                self._paced_step()
        finally:
            self._run_hooks(self._stop_hooks)
            logger.info("Engine stopped after tick %d", self._clock.tick_number)

    # --- Snapshot ---

    def snapshot(self) -> dict[str, Any]:
        state = self._state
        return {
            "version": _SNAPSHOT_VERSION,
            "tick_number": self._clock.tick_number,
            "calibration": calibration_to_dict(state.calibration),
            "timers": timers_to_list(state.timers),
            "last_fired": [[tid, key, at] for (tid, key), at in state.last_fired.items()],
            "last_tick_ms": state.last_tick_ms,
            "keep_awake": state.keep_awake,
            "preset_offset_hours": state.preset_offset_hours,
        }

    def restore(self, data: dict[str, Any]) -> None:
        version = data.get("version")
        if version != _SNAPSHOT_VERSION:
            raise SnapshotError(
                f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
            )
        try:
            state = SchedulerState(
                timers=tuple(timer_from_dict(t) for t in data["timers"]),
                calibration=calibration_from_dict(data["calibration"]),
                last_fired={(tid, key): at for tid, key, at in data["last_fired"]},
                last_tick_ms=data["last_tick_ms"],
                keep_awake=data["keep_awake"],
                preset_offset_hours=data["preset_offset_hours"],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SnapshotError(f"Malformed snapshot: {exc}") from exc

        self._clock.reset(data.get("tick_number", 0))
        self._state = state
        self._saved = self._persisted()
