"""Opening-hour schedules and resolved alert targets."""
from __future__ import annotations

from dataclasses import dataclass

from vana_calendar import Weekday


@dataclass(frozen=True)
class GuildSchedule:
    """Recurring daily opening time, optionally closed one weekday a week."""

    open_hour: int
    open_minute: int = 0
    closed_on: Weekday | None = None


@dataclass(frozen=True)
class AlertTarget:
    """In-game weekday + time at which an alert should fire."""

    weekday: Weekday
    hour: int
    minute: int

    @property
    def key(self) -> tuple[Weekday, int, int]:
        return (self.weekday, self.hour, self.minute)


@dataclass(frozen=True)
class LabeledTarget(AlertTarget):
    label: str = ""


@dataclass(frozen=True)
class Preset:
    """Named schedule offered as a one-click timer."""

    label: str
    schedule: GuildSchedule
