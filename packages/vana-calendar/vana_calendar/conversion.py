"""Real-time <-> Vana'diel conversion and next-occurrence resolvers."""
from __future__ import annotations

import math

from vana_calendar.moon import (
    current_moon_step_start,
    display_moon_step,
    moon_percent_from_step,
    moon_phase_name_from_step,
    next_moon_step_boundary,
)
from vana_calendar.types import (
    EARTH_MS_PER_MOON_STEP,
    MOON_STEPS_PER_CYCLE,
    VANA_MS_PER_VANA_SECOND,
    VANA_SECONDS_PER_DAY,
    VANA_SECONDS_PER_WEEK,
    WEEKDAYS,
    Calibration,
    VanaInstant,
    Weekday,
)


def vana_abs_seconds(earth_ms: int) -> int:
    return earth_ms // VANA_MS_PER_VANA_SECOND


def week_offset_seconds(earth_ms: int, cal: Calibration | None = None) -> int:
    """In-game seconds since the start of the current 8-day week."""
    calibrated = earth_ms + cal.time_offset_ms if cal is not None else earth_ms
    return vana_abs_seconds(calibrated) % VANA_SECONDS_PER_WEEK


def weekday_time_offset(weekday: Weekday | str, hour: int, minute: int) -> int:
    return Weekday(weekday).index * VANA_SECONDS_PER_DAY + hour * 3600 + minute * 60


def vana_now(earth_ms: int, cal: Calibration | None = None) -> VanaInstant:
    """Convert a real instant to in-game weekday/time and moon state.

    Day/time uses the calibrated instant; the moon uses the raw one. The two
    calibrations are independent.
    """
    offset = week_offset_seconds(earth_ms, cal)
    day_index, time_of_day = divmod(offset, VANA_SECONDS_PER_DAY)

    step = display_moon_step(earth_ms, cal)

    return VanaInstant(
        weekday=WEEKDAYS[day_index],
        hour=time_of_day // 3600,
        minute=(time_of_day % 3600) // 60,
        week_offset_seconds=offset,
        moon_step=step,
        moon_percent=moon_percent_from_step(step),
        moon_phase_name=moon_phase_name_from_step(step),
        next_moon_step_at_earth_ms=next_moon_step_boundary(earth_ms, cal),
    )


def next_earth_ms_for_weekday_time(
    now_ms: int,
    cal: Calibration | None,
    weekday: Weekday | str,
    hour: int,
    minute: int,
) -> int:
    """Next real instant showing ``weekday hour:minute``; always after now.

    An exact match with the current in-game minute and second rolls to next week.
    """
    now = vana_now(now_ms, cal)
    delta = weekday_time_offset(weekday, hour, minute) - now.week_offset_seconds
    if delta <= 0:
        delta += VANA_SECONDS_PER_WEEK
    return now_ms + delta * VANA_MS_PER_VANA_SECOND


def _steps_until(target_step: int, current_step: int) -> int:
    return (target_step - current_step) % MOON_STEPS_PER_CYCLE


def next_earth_ms_for_moon_step(
    now_ms: int, cal: Calibration | None, target_step: float
) -> int:
    """Start of the next occurrence of a display step.

    Measured from the start of the current step, so the result is identical
    for every ``now_ms`` inside one step. A zero delta is allowed and means
    the target step is active right now.
    """
    base = current_moon_step_start(now_ms, cal)
    target = math.floor(target_step) % MOON_STEPS_PER_CYCLE
    delta = _steps_until(target, display_moon_step(base, cal))
    return base + delta * EARTH_MS_PER_MOON_STEP


def next_earth_ms_for_moon_percent(
    now_ms: int, cal: Calibration | None, target_percent: float
) -> int:
    """Legacy percent target; the nearer of its waxing/waning steps wins.

    0% and 100% each map to one step only.
    """
    base = current_moon_step_start(now_ms, cal)
    current = display_moon_step(base, cal)

    p = max(0, min(100, math.floor(target_percent)))
    candidates = [p]
    if p not in (0, 100):
        candidates.append(MOON_STEPS_PER_CYCLE - p)

    delta = min(_steps_until(c, current) for c in candidates)
    return base + delta * EARTH_MS_PER_MOON_STEP
