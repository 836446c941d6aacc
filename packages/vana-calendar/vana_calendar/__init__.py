"""vana-calendar - Vana'diel calendar and moon conversion."""
from __future__ import annotations

from vana_calendar.calibration import calibration_from_snapshot, with_moon_anchor
from vana_calendar.conversion import (
    next_earth_ms_for_moon_percent,
    next_earth_ms_for_moon_step,
    next_earth_ms_for_weekday_time,
    vana_now,
    week_offset_seconds,
)
from vana_calendar.moon import (
    current_moon_step_start,
    moon_direction_from_step,
    moon_direction_glyph,
    moon_percent_from_step,
    moon_phase_name_from_step,
    next_moon_step_boundary,
    step_from_direction_and_percent,
)
from vana_calendar.types import (
    DEFAULT_CALIBRATION,
    EARTH_MS_PER_MOON_STEP,
    MOON_STEPS_PER_CYCLE,
    VANA_MS_PER_VANA_SECOND,
    VANA_SECONDS_PER_DAY,
    VANA_SECONDS_PER_WEEK,
    WEEKDAYS,
    Calibration,
    MoonDirection,
    VanaInstant,
    Weekday,
)

__all__ = [
    "Calibration",
    "DEFAULT_CALIBRATION",
    "MoonDirection",
    "VanaInstant",
    "Weekday",
    "WEEKDAYS",
    "VANA_MS_PER_VANA_SECOND",
    "VANA_SECONDS_PER_DAY",
    "VANA_SECONDS_PER_WEEK",
    "MOON_STEPS_PER_CYCLE",
    "EARTH_MS_PER_MOON_STEP",
    "vana_now",
    "week_offset_seconds",
    "next_earth_ms_for_weekday_time",
    "next_earth_ms_for_moon_step",
    "next_earth_ms_for_moon_percent",
    "next_moon_step_boundary",
    "current_moon_step_start",
    "moon_percent_from_step",
    "moon_direction_from_step",
    "moon_phase_name_from_step",
    "moon_direction_glyph",
    "step_from_direction_and_percent",
    "calibration_from_snapshot",
    "with_moon_anchor",
]
