"""Timer records, due events and timer errors."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from vana_calendar import Weekday

EXPIRY_GRACE_MS = 60_000
EARTH_DAY_MS = 24 * 60 * 60 * 1000


class TimerKind(str, Enum):
    VANA_WEEKDAY_TIME = "VANA_WEEKDAY_TIME"
    MOON_STEP = "MOON_STEP"
    MOON_PERCENT = "MOON_PERCENT"
    EARTH_TIME = "EARTH_TIME"
    NM_TIMED_WINDOW = "NM_TIMED_WINDOW"
    NM_LOTTERY = "NM_LOTTERY"


class PostFire(str, Enum):
    """State change the loop applies after an event has fired."""

    ADVANCE_DAY = "ADVANCE_DAY"
    CLEAR_PLACEHOLDER = "CLEAR_PLACEHOLDER"


class InvalidInputError(ValueError):
    """Raised when user-entered timer values cannot be turned into a timer."""


class TimerDecodeError(ValueError):
    """Raised when a persisted timer record cannot be decoded."""


@dataclass(frozen=True, kw_only=True)
class BaseTimer:
    """Fields shared by every timer kind.

    Attributes:
        id: Unique identifier within a timer collection.
        label: User-facing name, used in notification bodies.
        enabled: Disabled timers never produce events.
        created_at_ms: Real-world creation instant (epoch ms).
    """

    kind: ClassVar[TimerKind]

    id: str
    label: str
    enabled: bool = True
    created_at_ms: int = 0


@dataclass(frozen=True, kw_only=True)
class WeekdayTimer(BaseTimer):
    """Fires at the next in-game weekday + time."""

    kind: ClassVar[TimerKind] = TimerKind.VANA_WEEKDAY_TIME

    target_weekday: Weekday
    target_hour: int
    target_minute: int


@dataclass(frozen=True, kw_only=True)
class MoonStepTimer(BaseTimer):
    kind: ClassVar[TimerKind] = TimerKind.MOON_STEP

    target_moon_step: int  # display step, 0..199


@dataclass(frozen=True, kw_only=True)
class MoonPercentTimer(BaseTimer):
    """Legacy percent-only moon timer. Kept so stored timers still load."""

    kind: ClassVar[TimerKind] = TimerKind.MOON_PERCENT

    target_percent: int


@dataclass(frozen=True, kw_only=True)
class EarthTimer(BaseTimer):
    """Daily real-world alarm. Advanced by one day each time it fires."""

    kind: ClassVar[TimerKind] = TimerKind.EARTH_TIME

    target_earth_ms: int
    raw_input: str = ""


@dataclass(frozen=True, kw_only=True)
class NmTimedWindowTimer(BaseTimer):
    """Repeating pop checks inside ``[base + start, base + end]``.

    Attributes:
        base_earth_ms: Time of death the window is anchored to.
        window_start_offset_ms: Offset of the first pop check from the base.
        window_end_offset_ms: Offset of the window end from the base.
        interval_ms: Spacing between pop checks.
        warn_lead_ms: How long before each check to warn. 0 disables warnings.
    """

    kind: ClassVar[TimerKind] = TimerKind.NM_TIMED_WINDOW

    base_earth_ms: int
    window_start_offset_ms: int
    window_end_offset_ms: int
    interval_ms: int
    warn_lead_ms: int = 0


@dataclass(frozen=True, kw_only=True)
class NmLotteryTimer(BaseTimer):
    """Window-open alert plus an optional placeholder respawn alert.

    Attributes:
        base_earth_ms: Time of death the window is anchored to.
        window_start_offset_ms: Offset of the window opening from the base.
        warn_lead_ms: How long before each alert to warn. 0 disables warnings.
        ph_respawn_ms: Placeholder respawn time used when a kill is recorded.
        ph_next_at_ms: Expected placeholder respawn, None until a kill is recorded.
    """

    kind: ClassVar[TimerKind] = TimerKind.NM_LOTTERY

    base_earth_ms: int
    window_start_offset_ms: int
    ph_respawn_ms: int
    warn_lead_ms: int = 0
    ph_next_at_ms: int | None = None


Timer = Union[
    WeekdayTimer,
    MoonStepTimer,
    MoonPercentTimer,
    EarthTimer,
    NmTimedWindowTimer,
    NmLotteryTimer,
]

TIMER_TYPES: dict[TimerKind, type[BaseTimer]] = {
    cls.kind: cls
    for cls in (
        WeekdayTimer,
        MoonStepTimer,
        MoonPercentTimer,
        EarthTimer,
        NmTimedWindowTimer,
        NmLotteryTimer,
    )
}


@dataclass(frozen=True)
class TimerEvent:
    """A timer's next notification.

    ``dedup_key`` is stable per sub-event of one timer, so the loop can
    suppress re-fires while the same event stays due.
    """

    due_at_ms: int
    title: str
    body: str
    dedup_key: str
    repeat: bool = True
    post_fire: PostFire | None = None
