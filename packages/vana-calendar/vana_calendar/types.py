"""Calendar constants and value types for Vana'diel time."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Game constants. These are measured values; keep them exact.
VANA_MS_PER_VANA_SECOND = 40
VANA_SECONDS_PER_DAY = 86400
VANA_DAYS_PER_WEEK = 8
VANA_SECONDS_PER_WEEK = VANA_SECONDS_PER_DAY * VANA_DAYS_PER_WEEK

MOON_STEPS_PER_CYCLE = 200
EARTH_MS_PER_MOON_STEP = 1_451_520
EARTH_MS_PER_MOON_CYCLE = EARTH_MS_PER_MOON_STEP * MOON_STEPS_PER_CYCLE
MOON_DISPLAY_STEP_OFFSET = 10


class Weekday(str, Enum):
    FIRESDAY = "Firesday"
    EARTHSDAY = "Earthsday"
    WATERSDAY = "Watersday"
    WINDSDAY = "Windsday"
    ICEDAY = "Iceday"
    LIGHTNINGDAY = "Lightningday"
    LIGHTSDAY = "Lightsday"
    DARKSDAY = "Darksday"

    @property
    def index(self) -> int:
        """Position in the 8-day week, Firesday = 0."""
        return WEEKDAYS.index(self)


WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)


class MoonDirection(str, Enum):
    WAXING = "WAXING"
    WANING = "WANING"


@dataclass(frozen=True, slots=True)
class Calibration:
    """Offsets anchoring the conversion to observed in-game state.

    ``time_offset_ms`` is added to real time before the day/time conversion.
    ``new_moon_start_earth_ms`` is a real instant at raw moon step 0; a value
    ``<= 0`` means the moon is computed from epoch time with no anchor.
    """

    time_offset_ms: int = 0
    new_moon_start_earth_ms: int = 0

    @property
    def has_moon_anchor(self) -> bool:
        return self.new_moon_start_earth_ms > 0


# Aligns the uncalibrated epoch mapping with the public clock basis
# (Vana'diel 0898/02/01 00:00 at 2002-01-01 00:00 UTC).
DEFAULT_CALIBRATION = Calibration(time_offset_ms=-6_912_000, new_moon_start_earth_ms=0)


@dataclass(frozen=True, slots=True)
class VanaInstant:
    """In-game calendar and moon state at one real-world instant."""

    weekday: Weekday
    hour: int
    minute: int
    week_offset_seconds: int
    moon_step: int
    moon_percent: int
    moon_phase_name: str
    next_moon_step_at_earth_ms: int

    @property
    def moon_direction(self) -> MoonDirection:
        return MoonDirection.WAXING if self.moon_step < 100 else MoonDirection.WANING
