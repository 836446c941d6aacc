"""vana - Polling loop for Vana'diel clock timers."""
from __future__ import annotations

from vana.clock import Clock, effective_previous_tick, wall_clock_ms
from vana.config import ClockConfig
from vana.engine import Engine
from vana.state import SchedulerState, apply_action, apply_tick, stopped_timers, sync_keep_awake
from vana.types import (
    Action,
    AddTimer,
    ClearCalibration,
    ClearPlaceholder,
    DeleteTimer,
    DismissTimer,
    Effect,
    KeepAwake,
    Notify,
    RecordPlaceholderKill,
    SetCalibration,
    SetEnabled,
    SetPresetOffset,
    SetTod,
    SnapshotError,
    StopNotification,
    ToggleTimer,
)

__all__ = [
    "Engine",
    "Clock",
    "ClockConfig",
    "SchedulerState",
    "apply_tick",
    "apply_action",
    "sync_keep_awake",
    "stopped_timers",
    "effective_previous_tick",
    "wall_clock_ms",
    "Effect",
    "Notify",
    "KeepAwake",
    "StopNotification",
    "Action",
    "AddTimer",
    "SetEnabled",
    "ToggleTimer",
    "DeleteTimer",
    "DismissTimer",
    "SetTod",
    "RecordPlaceholderKill",
    "ClearPlaceholder",
    "SetCalibration",
    "ClearCalibration",
    "SetPresetOffset",
    "SnapshotError",
]
