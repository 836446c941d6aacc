"""Load and save calibration, timers and preset offset."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from vana_calendar import DEFAULT_CALIBRATION, Calibration
from vana_schedule import DEFAULT_PRESET_OFFSET_HOURS, clamp_offset_hours
from vana_timer import Timer, timers_from_list, timers_to_list

from vana_store.store import KeyValueStore

logger = logging.getLogger(__name__)

CALIBRATION_KEY = "ffxi_cal_v1"
TIMERS_KEY = "ffxi_timers_v2"
PRESET_OFFSET_KEY = "ffxi_preset_offset_hours_v1"


@dataclass(frozen=True)
class PersistedState:
    calibration: Calibration = DEFAULT_CALIBRATION
    timers: tuple[Timer, ...] = ()
    preset_offset_hours: int = DEFAULT_PRESET_OFFSET_HOURS


def calibration_to_dict(cal: Calibration) -> dict[str, int]:
    return {
        "timeOffsetMs": cal.time_offset_ms,
        "newMoonStartEarthMs": cal.new_moon_start_earth_ms,
    }


def _finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def calibration_from_dict(data: Any) -> Calibration:
    """Stored calibration, or the default when absent, null or malformed."""
    if data is None:
        return DEFAULT_CALIBRATION
    if not isinstance(data, dict) or not _finite(data.get("timeOffsetMs")):
        logger.warning("Ignoring malformed stored calibration %r", data)
        return DEFAULT_CALIBRATION
    anchor = data.get("newMoonStartEarthMs", 0)
    return Calibration(
        time_offset_ms=int(data["timeOffsetMs"]),
        new_moon_start_earth_ms=int(anchor) if _finite(anchor) else 0,
    )


def load_state(store: KeyValueStore) -> PersistedState:
    offset = store.load(PRESET_OFFSET_KEY, DEFAULT_PRESET_OFFSET_HOURS)
    if not _finite(offset):
        logger.warning("Ignoring malformed stored preset offset %r", offset)
        offset = DEFAULT_PRESET_OFFSET_HOURS

    return PersistedState(
        calibration=calibration_from_dict(store.load(CALIBRATION_KEY)),
        timers=timers_from_list(store.load(TIMERS_KEY, [])),
        preset_offset_hours=clamp_offset_hours(offset),
    )


def save_state(store: KeyValueStore, state: PersistedState) -> bool:
    """Write every key; returns False if any write failed."""
    results = [
        store.save(CALIBRATION_KEY, calibration_to_dict(state.calibration)),
        store.save(TIMERS_KEY, timers_to_list(state.timers)),
        store.save(PRESET_OFFSET_KEY, state.preset_offset_hours),
    ]
    return all(results)
