"""Building calibrations from an observed in-game reading."""
from __future__ import annotations

import math

from vana_calendar.conversion import week_offset_seconds, weekday_time_offset
from vana_calendar.types import (
    VANA_MS_PER_VANA_SECOND,
    VANA_SECONDS_PER_WEEK,
    Calibration,
    Weekday,
)


def calibration_from_snapshot(
    snapshot_earth_ms: int,
    weekday: Weekday | str,
    hour: float,
    minute: float,
    new_moon_start_earth_ms: int = 0,
) -> Calibration:
    """Offset that makes ``snapshot_earth_ms`` read as ``weekday hour:minute``.

    The shift is normalized to at most half a week either way. The moon
    anchor is passed through untouched.
    """
    desired = weekday_time_offset(weekday, math.floor(hour), math.floor(minute))
    uncalibrated = week_offset_seconds(snapshot_earth_ms)

    delta = desired - uncalibrated
    if delta > VANA_SECONDS_PER_WEEK / 2:
        delta -= VANA_SECONDS_PER_WEEK
    if delta < -VANA_SECONDS_PER_WEEK / 2:
        delta += VANA_SECONDS_PER_WEEK

    return Calibration(
        time_offset_ms=delta * VANA_MS_PER_VANA_SECOND,
        new_moon_start_earth_ms=int(new_moon_start_earth_ms),
    )


def with_moon_anchor(cal: Calibration, new_moon_start_earth_ms: int) -> Calibration:
    """Replace only the moon anchor; the day/time offset is kept."""
    return Calibration(
        time_offset_ms=cal.time_offset_ms,
        new_moon_start_earth_ms=int(new_moon_start_earth_ms),
    )
