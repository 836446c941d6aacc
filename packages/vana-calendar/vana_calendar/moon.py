"""Moon step arithmetic: raw/display steps, boundaries, percent and phase."""
from __future__ import annotations

import math

from vana_calendar.types import (
    EARTH_MS_PER_MOON_CYCLE,
    EARTH_MS_PER_MOON_STEP,
    MOON_DISPLAY_STEP_OFFSET,
    MOON_STEPS_PER_CYCLE,
    Calibration,
    MoonDirection,
)


def _anchor(cal: Calibration | None) -> int | None:
    if cal is None or not cal.has_moon_anchor:
        return None
    return cal.new_moon_start_earth_ms


def _elapsed_in_anchor_cycle(earth_ms: int, anchor: int) -> int:
    """Real ms elapsed since the most recent anchor-cycle boundary."""
    remaining = (anchor - earth_ms) % EARTH_MS_PER_MOON_CYCLE
    return (EARTH_MS_PER_MOON_CYCLE - remaining) % EARTH_MS_PER_MOON_CYCLE


def raw_moon_step(earth_ms: int, cal: Calibration | None = None) -> int:
    anchor = _anchor(cal)
    if anchor is None:
        return (earth_ms // EARTH_MS_PER_MOON_STEP) % MOON_STEPS_PER_CYCLE
    elapsed = _elapsed_in_anchor_cycle(earth_ms, anchor)
    return (elapsed // EARTH_MS_PER_MOON_STEP) % MOON_STEPS_PER_CYCLE


def display_step(raw_step: int) -> int:
    return (raw_step - MOON_DISPLAY_STEP_OFFSET) % MOON_STEPS_PER_CYCLE


def display_moon_step(earth_ms: int, cal: Calibration | None = None) -> int:
    return display_step(raw_moon_step(earth_ms, cal))


def next_moon_step_boundary(earth_ms: int, cal: Calibration | None = None) -> int:
    """Next real instant at which the raw step increments.

    The display offset shifts labels only; boundary times are the same.
    """
    anchor = _anchor(cal)
    if anchor is None:
        step_start = (earth_ms // EARTH_MS_PER_MOON_STEP) * EARTH_MS_PER_MOON_STEP
        return step_start + EARTH_MS_PER_MOON_STEP

    into_step = _elapsed_in_anchor_cycle(earth_ms, anchor) % EARTH_MS_PER_MOON_STEP
    if into_step == 0:
        return earth_ms + EARTH_MS_PER_MOON_STEP
    return earth_ms + (EARTH_MS_PER_MOON_STEP - into_step)


def current_moon_step_start(earth_ms: int, cal: Calibration | None = None) -> int:
    """Start of the step containing ``earth_ms``.

    Stable for every instant inside one step, so schedules computed from it
    do not creep forward as "now" advances.
    """
    return next_moon_step_boundary(earth_ms, cal) - EARTH_MS_PER_MOON_STEP


def _normalize_step(step: float) -> int:
    return math.floor(step) % MOON_STEPS_PER_CYCLE


def moon_percent_from_step(step: float) -> int:
    s = _normalize_step(step)
    return s if s <= 100 else MOON_STEPS_PER_CYCLE - s


def moon_direction_from_step(step: float) -> MoonDirection:
    return MoonDirection.WAXING if _normalize_step(step) < 100 else MoonDirection.WANING


def moon_phase_name_from_step(step: float) -> str:
    s = _normalize_step(step)
    pct = moon_percent_from_step(s)
    waxing = s < 100

    if pct >= 87:
        return "Full Moon"
    if pct >= 57:
        return "Waxing Gibbous" if waxing else "Waning Gibbous"
    if pct >= 37:
        return "First Quarter" if waxing else "Last Quarter"
    if pct >= 7:
        return "Waxing Crescent" if waxing else "Waning Crescent"
    return "New Moon"


def step_from_direction_and_percent(direction: MoonDirection | str, percent: float) -> int:
    """Display step for a direction + percent pair.

    0% and 100% have a single step each and map to the waxing side.
    """
    p = max(0, min(100, math.floor(percent)))
    if p == 100:
        return 100
    if MoonDirection(direction) is MoonDirection.WAXING:
        return p
    if p == 0:
        return 0
    return MOON_STEPS_PER_CYCLE - p


def moon_direction_glyph(direction: MoonDirection | str) -> str:
    return "▲" if MoonDirection(direction) is MoonDirection.WAXING else "▼"
