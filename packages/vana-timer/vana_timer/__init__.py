"""vana-timer - Timer model, due-time dispatch and user actions."""
from __future__ import annotations

from vana_timer.actions import (
    add,
    advance_day,
    any_enabled,
    clear_placeholder,
    delete,
    find,
    record_placeholder_kill,
    set_enabled,
    set_tod,
    toggle,
)
from vana_timer.codec import timer_from_dict, timer_to_dict, timers_from_list, timers_to_list
from vana_timer.dispatch import (
    NOTIFICATION_TITLE,
    next_event,
    next_occurrence,
    placeholder_expired,
    window_expired,
)
from vana_timer.factory import (
    new_earth_timer,
    new_moon_step_timer,
    new_nm_lottery_timer,
    new_nm_timed_window_timer,
    new_preset_timer,
    new_timer_id,
    new_weekday_timer,
)
from vana_timer.types import (
    EXPIRY_GRACE_MS,
    EarthTimer,
    InvalidInputError,
    MoonPercentTimer,
    MoonStepTimer,
    NmLotteryTimer,
    NmTimedWindowTimer,
    PostFire,
    Timer,
    TimerDecodeError,
    TimerEvent,
    TimerKind,
    WeekdayTimer,
)

__all__ = [
    "TimerKind",
    "Timer",
    "WeekdayTimer",
    "MoonStepTimer",
    "MoonPercentTimer",
    "EarthTimer",
    "NmTimedWindowTimer",
    "NmLotteryTimer",
    "TimerEvent",
    "PostFire",
    "EXPIRY_GRACE_MS",
    "NOTIFICATION_TITLE",
    "InvalidInputError",
    "TimerDecodeError",
    "next_event",
    "next_occurrence",
    "window_expired",
    "placeholder_expired",
    "add",
    "find",
    "any_enabled",
    "set_enabled",
    "toggle",
    "delete",
    "set_tod",
    "record_placeholder_kill",
    "clear_placeholder",
    "advance_day",
    "new_timer_id",
    "new_weekday_timer",
    "new_earth_timer",
    "new_moon_step_timer",
    "new_nm_timed_window_timer",
    "new_nm_lottery_timer",
    "new_preset_timer",
    "timer_to_dict",
    "timer_from_dict",
    "timers_to_list",
    "timers_from_list",
]
