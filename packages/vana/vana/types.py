"""Effects, user actions and errors for the polling loop."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from vana_calendar import Calibration
from vana_timer import Timer


# --- Effects (returned by the reducer, delivered by the engine) ---


@dataclass(frozen=True, slots=True)
class Notify:
    timer_id: str
    title: str
    body: str
    repeat: bool
    dedup_key: str
    due_at_ms: int


@dataclass(frozen=True, slots=True)
class KeepAwake:
    enabled: bool


@dataclass(frozen=True, slots=True)
class StopNotification:
    """A timer stopped being active; its repeating notification should end."""

    timer_id: str


Effect = Union[Notify, KeepAwake, StopNotification]


# --- User actions ---


@dataclass(frozen=True, slots=True)
class AddTimer:
    timer: Timer


@dataclass(frozen=True, slots=True)
class SetEnabled:
    timer_id: str
    enabled: bool


@dataclass(frozen=True, slots=True)
class ToggleTimer:
    timer_id: str


@dataclass(frozen=True, slots=True)
class DeleteTimer:
    timer_id: str


@dataclass(frozen=True, slots=True)
class DismissTimer:
    """The user clicked a notification; the timer is disabled."""

    timer_id: str


@dataclass(frozen=True, slots=True)
class SetTod:
    timer_id: str
    base_earth_ms: int


@dataclass(frozen=True, slots=True)
class RecordPlaceholderKill:
    timer_id: str
    now_ms: int


@dataclass(frozen=True, slots=True)
class ClearPlaceholder:
    timer_id: str


@dataclass(frozen=True, slots=True)
class SetCalibration:
    calibration: Calibration


@dataclass(frozen=True, slots=True)
class ClearCalibration:
    pass


@dataclass(frozen=True, slots=True)
class SetPresetOffset:
    hours: float


Action = Union[
    AddTimer,
    SetEnabled,
    ToggleTimer,
    DeleteTimer,
    DismissTimer,
    SetTod,
    RecordPlaceholderKill,
    ClearPlaceholder,
    SetCalibration,
    ClearCalibration,
    SetPresetOffset,
]


class SnapshotError(Exception):
    """Raised on restore failures (version mismatch, malformed data)."""
