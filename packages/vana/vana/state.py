"""Scheduler state and its pure transitions: ``apply_tick`` and ``apply_action``."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping

from vana_calendar import DEFAULT_CALIBRATION, Calibration
from vana_schedule import DEFAULT_PRESET_OFFSET_HOURS, clamp_offset_hours
from vana_timer import (
    PostFire,
    Timer,
    actions,
    next_event,
    placeholder_expired,
    window_expired,
)

from vana.clock import effective_previous_tick
from vana.config import ClockConfig
from vana.types import (
    Action,
    AddTimer,
    ClearCalibration,
    ClearPlaceholder,
    DeleteTimer,
    DismissTimer,
    Effect,
    KeepAwake,
    Notify,
    RecordPlaceholderKill,
    SetCalibration,
    SetEnabled,
    SetPresetOffset,
    SetTod,
    StopNotification,
    ToggleTimer,
)

logger = logging.getLogger(__name__)

FireKey = tuple[str, str]  # (timer id, dedup key)


@dataclass(frozen=True)
class SchedulerState:
    """Everything the loop needs between ticks.

    Attributes:
        timers: Timer collection, newest first.
        calibration: Active calendar calibration.
        last_fired: When each (timer id, dedup key) last notified.
        last_tick_ms: Instant of the previous tick, None before the first.
        keep_awake: Last keep-awake state signalled, None if never signalled.
        preset_offset_hours: Lead time used when adding preset timers.
    """

    timers: tuple[Timer, ...] = ()
    calibration: Calibration = DEFAULT_CALIBRATION
    last_fired: Mapping[FireKey, int] = field(default_factory=dict)
    last_tick_ms: int | None = None
    keep_awake: bool | None = None
    preset_offset_hours: int = DEFAULT_PRESET_OFFSET_HOURS


def sync_keep_awake(state: SchedulerState) -> tuple[SchedulerState, list[Effect]]:
    """Emit ``KeepAwake`` when "any timer enabled" differs from what was last signalled."""
    enabled = actions.any_enabled(state.timers)
    if state.keep_awake is enabled:
        return state, []
    return replace(state, keep_awake=enabled), [KeepAwake(enabled)]


def apply_tick(
    state: SchedulerState, now_ms: int, config: ClockConfig | None = None
) -> tuple[SchedulerState, list[Effect]]:
    """Run one polling pass at ``now_ms``.

    Events are computed from the previous tick so a boundary crossed between
    ticks is still seen. An event notifies at most once per suppression
    window per (timer, dedup key). Expired windows and stale placeholders
    are applied as a batch after the pass.
    """
    config = config if config is not None else ClockConfig()
    since = effective_previous_tick(state.last_tick_ms, now_ms, config.max_catchup_ms)
    last_fired = {
        key: at for key, at in state.last_fired.items() if now_ms - at <= config.refire_suppress_ms
    }

    effects: list[Effect] = []
    expired: list[str] = []
    clear_ph: list[str] = []
    advance: list[str] = []

    for timer in state.timers:
        if not timer.enabled:
            continue
        if window_expired(timer, now_ms):
            expired.append(timer.id)
            continue
        if placeholder_expired(timer, now_ms):
            clear_ph.append(timer.id)

        event = next_event(timer, since, state.calibration, config.notification_title)
        if event is None or event.due_at_ms > now_ms:
            continue

        key = (timer.id, event.dedup_key)
        last = last_fired.get(key)
        if last is None or now_ms - last > config.refire_suppress_ms:
            last_fired[key] = now_ms
            effects.append(
                Notify(
                    timer_id=timer.id,
                    title=event.title,
                    body=event.body,
                    repeat=event.repeat,
                    dedup_key=event.dedup_key,
                    due_at_ms=event.due_at_ms,
                )
            )
            logger.info("Timer %s fired (%s): %s", timer.id, event.dedup_key, event.body)

        if event.post_fire is PostFire.ADVANCE_DAY:
            advance.append(timer.id)
        elif event.post_fire is PostFire.CLEAR_PLACEHOLDER:
            clear_ph.append(timer.id)

    timers = state.timers
    for timer_id in advance:
        timers = actions.advance_day(timers, timer_id, now_ms)
    for timer_id in expired:
        logger.info("Timer %s window ended; disabling", timer_id)
        timers = actions.set_enabled(timers, timer_id, False)
    for timer_id in dict.fromkeys(clear_ph):
        logger.info("Timer %s placeholder cleared", timer_id)
        timers = actions.clear_placeholder(timers, timer_id)

    state = replace(state, timers=timers, last_fired=last_fired, last_tick_ms=now_ms)
    state, keep_awake = sync_keep_awake(state)
    return state, effects + keep_awake


def _forget(last_fired: Mapping[FireKey, int], timer_id: str) -> dict[FireKey, int]:
    return {key: at for key, at in last_fired.items() if key[0] != timer_id}


def apply_action(state: SchedulerState, action: Action) -> SchedulerState:
    """Apply one user action. Raises TypeError for anything that is not an action."""
    timers = state.timers
    if isinstance(action, AddTimer):
        return replace(state, timers=actions.add(timers, action.timer))
    if isinstance(action, SetEnabled):
        return replace(state, timers=actions.set_enabled(timers, action.timer_id, action.enabled))
    if isinstance(action, ToggleTimer):
        return replace(state, timers=actions.toggle(timers, action.timer_id))
    if isinstance(action, DeleteTimer):
        return replace(
            state,
            timers=actions.delete(timers, action.timer_id),
            last_fired=_forget(state.last_fired, action.timer_id),
        )
    if isinstance(action, DismissTimer):
        return replace(state, timers=actions.set_enabled(timers, action.timer_id, False))
    if isinstance(action, SetTod):
        return replace(state, timers=actions.set_tod(timers, action.timer_id, action.base_earth_ms))
    if isinstance(action, RecordPlaceholderKill):
        return replace(
            state,
            timers=actions.record_placeholder_kill(timers, action.timer_id, action.now_ms),
        )
    if isinstance(action, ClearPlaceholder):
        return replace(state, timers=actions.clear_placeholder(timers, action.timer_id))
    if isinstance(action, SetCalibration):
        return replace(state, calibration=action.calibration)
    if isinstance(action, ClearCalibration):
        return replace(state, calibration=DEFAULT_CALIBRATION)
    if isinstance(action, SetPresetOffset):
        return replace(state, preset_offset_hours=clamp_offset_hours(action.hours))
    raise TypeError(f"Unknown action {action!r}")


def stopped_timers(before: SchedulerState, after: SchedulerState) -> list[Effect]:
    """``StopNotification`` for every timer that was enabled and no longer is."""
    still_enabled = {t.id for t in after.timers if t.enabled}
    return [
        StopNotification(t.id) for t in before.timers if t.enabled and t.id not in still_enabled
    ]
