"""Build timers from user-entered values."""
from __future__ import annotations

import uuid
from datetime import tzinfo

from vana_calendar import (
    MoonDirection,
    Weekday,
    moon_direction_from_step,
    moon_direction_glyph,
    moon_percent_from_step,
    moon_phase_name_from_step,
    step_from_direction_and_percent,
)
from vana_parse import format_clock, parse_duration, parse_local_datetime
from vana_schedule import LabeledTarget, clamp_offset_hours

from vana_timer.dispatch import next_occurrence
from vana_timer.types import (
    EarthTimer,
    InvalidInputError,
    MoonStepTimer,
    NmLotteryTimer,
    NmTimedWindowTimer,
    WeekdayTimer,
)

DEFAULT_WARN_LEAD_MS = 10_000
MIN_INTERVAL_MS = 1_000
MIN_PH_RESPAWN_MS = 1_000


def new_timer_id() -> str:
    return uuid.uuid4().hex


def _clamp(value: float, lo: int, hi: int) -> int:
    return max(lo, min(hi, int(value)))


def _label(label: str, default: str) -> str:
    return label.strip() or default


def _weekday(value: Weekday | str) -> Weekday:
    try:
        return Weekday(value)
    except ValueError:
        raise InvalidInputError(f"unknown weekday {value!r}") from None


def _required_duration(raw: str, what: str) -> int:
    ms = parse_duration(raw)
    if ms is None:
        raise InvalidInputError(f"invalid {what} {raw!r}; try 2h, 2.5h, 5m or 1:45:55")
    return ms


def _tod(raw: str, now_ms: int, tz: tzinfo | None) -> int:
    """Blank means now; anything else must parse."""
    if not raw.strip():
        return now_ms
    ms = parse_local_datetime(raw, tz)
    if ms is None:
        raise InvalidInputError(
            f"invalid ToD {raw!r}; leave blank for now, or use YYYY-MM-DDTHH:MM:SS "
            "or MM/DD/YYYY HH:MM:SS AM"
        )
    return ms


def new_weekday_timer(
    label: str, weekday: Weekday | str, hour: int, minute: int, *, now_ms: int
) -> WeekdayTimer:
    return WeekdayTimer(
        id=new_timer_id(),
        label=_label(label, "Timer"),
        created_at_ms=now_ms,
        target_weekday=_weekday(weekday),
        target_hour=_clamp(hour, 0, 23),
        target_minute=_clamp(minute, 0, 59),
    )


def new_earth_timer(
    label: str, raw_when: str, *, now_ms: int, tz: tzinfo | None = None
) -> EarthTimer:
    """Daily real-world alarm, rolled forward to its next occurrence."""
    ms = parse_local_datetime(raw_when, tz)
    if ms is None:
        raise InvalidInputError(f"invalid real life time {raw_when!r}")
    return EarthTimer(
        id=new_timer_id(),
        label=_label(label, "Real Life Timer"),
        created_at_ms=now_ms,
        target_earth_ms=next_occurrence(ms, now_ms),
        raw_input=raw_when,
    )


def new_moon_step_timer(
    label: str, direction: MoonDirection | str, percent: int, *, now_ms: int
) -> MoonStepTimer:
    """Moon timer for a direction + percent, labelled with the resolved phase."""
    try:
        direction = MoonDirection(direction)
    except ValueError:
        raise InvalidInputError(f"unknown moon direction {direction!r}") from None

    step = step_from_direction_and_percent(direction, _clamp(percent, 0, 100))
    resolved = moon_direction_from_step(step)
    details = (
        f"{moon_direction_glyph(resolved)} {resolved.value} {moon_percent_from_step(step)}%, "
        f"{moon_phase_name_from_step(step)}, step {step}"
    )
    return MoonStepTimer(
        id=new_timer_id(),
        label=f"{_label(label, 'Moon Timer')} ({details})",
        created_at_ms=now_ms,
        target_moon_step=step,
    )


def new_nm_timed_window_timer(
    label: str,
    *,
    now_ms: int,
    tod: str = "",
    window_start: str = "2h",
    window_end: str = "2.5h",
    interval: str = "5m",
    warn_lead: str = "10s",
    tz: tzinfo | None = None,
) -> NmTimedWindowTimer:
    start_ms = _required_duration(window_start, "window start")
    end_ms = _required_duration(window_end, "window end")
    interval_ms = _required_duration(interval, "interval")
    if end_ms < start_ms:
        raise InvalidInputError("window end must be >= window start")
    warn_ms = parse_duration(warn_lead)

    return NmTimedWindowTimer(
        id=new_timer_id(),
        label=_label(label, "NM Timer"),
        created_at_ms=now_ms,
        base_earth_ms=_tod(tod, now_ms, tz),
        window_start_offset_ms=start_ms,
        window_end_offset_ms=end_ms,
        interval_ms=max(MIN_INTERVAL_MS, interval_ms),
        warn_lead_ms=DEFAULT_WARN_LEAD_MS if warn_ms is None else warn_ms,
    )


def new_nm_lottery_timer(
    label: str,
    *,
    now_ms: int,
    tod: str = "",
    window_open: str = "1:45:55",
    ph_respawn: str = "5m",
    warn_lead: str = "10s",
    tz: tzinfo | None = None,
) -> NmLotteryTimer:
    open_ms = _required_duration(window_open, "window open")
    respawn_ms = _required_duration(ph_respawn, "PH respawn")
    warn_ms = parse_duration(warn_lead)

    return NmLotteryTimer(
        id=new_timer_id(),
        label=_label(label, "Lottery NM"),
        created_at_ms=now_ms,
        base_earth_ms=_tod(tod, now_ms, tz),
        window_start_offset_ms=open_ms,
        ph_respawn_ms=max(MIN_PH_RESPAWN_MS, respawn_ms),
        warn_lead_ms=DEFAULT_WARN_LEAD_MS if warn_ms is None else warn_ms,
    )


def new_preset_timer(
    target: LabeledTarget, offset_hours: float, *, now_ms: int
) -> WeekdayTimer:
    """Weekday timer for a resolved preset, labelled with its offset and slot."""
    hours = clamp_offset_hours(offset_hours)
    slot = f"{target.weekday.value} {format_clock(target.hour, target.minute)}"
    return WeekdayTimer(
        id=new_timer_id(),
        label=f"{target.label} (offset {hours}h) - {slot}",
        created_at_ms=now_ms,
        target_weekday=target.weekday,
        target_hour=target.hour,
        target_minute=target.minute,
    )
