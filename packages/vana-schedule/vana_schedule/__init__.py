"""vana-schedule - Opening-hour alert resolvers and presets."""
from __future__ import annotations

from vana_schedule.components import AlertTarget, GuildSchedule, LabeledTarget, Preset
from vana_schedule.presets import (
    CLOTHCRAFT_GUILD,
    COOKING_GUILD,
    GUILD_PRESETS,
    LEATHERCRAFT_GUILD,
    NEXT_DIG,
    TENSHODO_LOCATIONS,
    build_tenshodo_presets,
    preset_targets,
    resolve_preset,
    tenshodo_targets,
)
from vana_schedule.resolvers import (
    DEFAULT_PRESET_OFFSET_HOURS,
    MAX_OFFSET_HOURS,
    MIN_OFFSET_HOURS,
    clamp_offset_hours,
    merge_targets,
    next_alert_target,
)

__all__ = [
    "GuildSchedule",
    "AlertTarget",
    "LabeledTarget",
    "Preset",
    "next_alert_target",
    "merge_targets",
    "clamp_offset_hours",
    "DEFAULT_PRESET_OFFSET_HOURS",
    "MIN_OFFSET_HOURS",
    "MAX_OFFSET_HOURS",
    "COOKING_GUILD",
    "LEATHERCRAFT_GUILD",
    "CLOTHCRAFT_GUILD",
    "NEXT_DIG",
    "GUILD_PRESETS",
    "TENSHODO_LOCATIONS",
    "build_tenshodo_presets",
    "resolve_preset",
    "tenshodo_targets",
    "preset_targets",
]
