"""Built-in guild, Tenshodo and digging schedules."""
from __future__ import annotations

from vana_calendar import Weekday

from vana_schedule.components import GuildSchedule, LabeledTarget, Preset
from vana_schedule.resolvers import WeekdayTime, merge_targets, next_alert_target

COOKING_GUILD = Preset("Cooking Guild", GuildSchedule(open_hour=5, closed_on=Weekday.DARKSDAY))
LEATHERCRAFT_GUILD = Preset("Leathercraft Guild", GuildSchedule(open_hour=3, closed_on=Weekday.ICEDAY))
CLOTHCRAFT_GUILD = Preset("Clothcraft Guild", GuildSchedule(open_hour=6, closed_on=Weekday.FIRESDAY))
# Digging resets at midnight every day.
NEXT_DIG = Preset("Next Dig", GuildSchedule(open_hour=0))

GUILD_PRESETS: tuple[Preset, ...] = (COOKING_GUILD, LEATHERCRAFT_GUILD, CLOTHCRAFT_GUILD, NEXT_DIG)

TENSHODO_LOCATIONS: tuple[tuple[str, GuildSchedule], ...] = (
    ("Lower Jeuno", GuildSchedule(open_hour=1, closed_on=Weekday.EARTHSDAY)),
    ("Port Bastok", GuildSchedule(open_hour=1, closed_on=Weekday.ICEDAY)),
    ("Norg", GuildSchedule(open_hour=9, closed_on=Weekday.DARKSDAY)),
)


def build_tenshodo_presets() -> list[Preset]:
    """One preset per distinct (open time, closed day); stable by open hour."""
    groups: dict[GuildSchedule, list[str]] = {}
    for name, schedule in TENSHODO_LOCATIONS:
        groups.setdefault(schedule, []).append(name)

    presets = []
    for schedule, names in groups.items():
        closed = f" (closed {schedule.closed_on.value})" if schedule.closed_on else ""
        presets.append(Preset(f"Tenshodo - {' + '.join(names)}{closed}", schedule))
    presets.sort(key=lambda p: p.schedule.open_hour)
    return presets


def resolve_preset(now: WeekdayTime, preset: Preset, offset_hours: float) -> LabeledTarget:
    target = next_alert_target(now, preset.schedule, offset_hours)
    return LabeledTarget(
        weekday=target.weekday, hour=target.hour, minute=target.minute, label=preset.label
    )


def tenshodo_targets(now: WeekdayTime, offset_hours: float) -> list[LabeledTarget]:
    return merge_targets(resolve_preset(now, p, offset_hours) for p in build_tenshodo_presets())


def preset_targets(now: WeekdayTime, offset_hours: float) -> list[LabeledTarget]:
    """Every built-in preset resolved against ``now``; Tenshodo merged."""
    targets = [resolve_preset(now, p, offset_hours) for p in GUILD_PRESETS]
    targets.extend(tenshodo_targets(now, offset_hours))
    return targets
