"""Resolve opening-hour schedules into concrete alert targets."""
from __future__ import annotations

from typing import Iterable, Protocol

from vana_calendar import WEEKDAYS, Weekday

from vana_schedule.components import AlertTarget, GuildSchedule, LabeledTarget

MIN_OFFSET_HOURS = 0
MAX_OFFSET_HOURS = 23
DEFAULT_PRESET_OFFSET_HOURS = 2

_MINUTES_PER_DAY = 24 * 60
_MINUTES_PER_WEEK = _MINUTES_PER_DAY * len(WEEKDAYS)


class WeekdayTime(Protocol):
    weekday: Weekday
    hour: int
    minute: int


def clamp_offset_hours(offset_hours: float) -> int:
    return max(MIN_OFFSET_HOURS, min(MAX_OFFSET_HOURS, int(offset_hours)))


def _weekday_at(week_minute: int) -> Weekday:
    return WEEKDAYS[(week_minute % _MINUTES_PER_WEEK) // _MINUTES_PER_DAY]


def next_alert_target(
    now: WeekdayTime, schedule: GuildSchedule, offset_hours: float
) -> AlertTarget:
    """Earliest upcoming alert ``offset_hours`` before an opening.

    Every open day is considered. A lead time that has already passed clamps
    to the opening itself, and a lead that would land on the closed weekday
    starts at midnight of the open day instead. The result is strictly in the
    future and never on ``closed_on``.
    """
    lead = clamp_offset_hours(offset_hours) * 60
    closed_on = Weekday(schedule.closed_on) if schedule.closed_on is not None else None
    now_minute = (
        Weekday(now.weekday).index * _MINUTES_PER_DAY + now.hour * 60 + now.minute
    )

    best: int | None = None
    for day in WEEKDAYS:
        if day is closed_on:
            continue
        open_at = day.index * _MINUTES_PER_DAY + schedule.open_hour * 60 + schedule.open_minute
        if open_at <= now_minute:
            open_at += _MINUTES_PER_WEEK

        fire_at = open_at - lead
        if closed_on is not None and _weekday_at(fire_at) is closed_on:
            fire_at = open_at - open_at % _MINUTES_PER_DAY
        if fire_at <= now_minute:
            fire_at = open_at

        if best is None or fire_at < best:
            best = fire_at

    if best is None:
        raise ValueError("schedule has no open weekday")

    minute_of_day = best % _MINUTES_PER_DAY
    return AlertTarget(
        weekday=_weekday_at(best),
        hour=minute_of_day // 60,
        minute=minute_of_day % 60,
    )


def merge_targets(targets: Iterable[LabeledTarget]) -> list[LabeledTarget]:
    """Collapse targets sharing weekday+time, joining distinct labels with " / "."""
    merged: dict[tuple[Weekday, int, int], LabeledTarget] = {}
    for target in targets:
        existing = merged.get(target.key)
        if existing is None:
            merged[target.key] = target
            continue
        parts = [p.strip() for p in existing.label.split(" / ")]
        if target.label not in parts:
            parts.append(target.label)
        merged[target.key] = LabeledTarget(
            weekday=existing.weekday,
            hour=existing.hour,
            minute=existing.minute,
            label=" / ".join(parts),
        )
    return list(merged.values())
