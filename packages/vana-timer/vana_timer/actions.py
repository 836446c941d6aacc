"""Pure user actions over an ordered timer collection (newest first)."""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable

from vana_timer.dispatch import next_occurrence
from vana_timer.types import EarthTimer, NmLotteryTimer, NmTimedWindowTimer, Timer

Timers = tuple[Timer, ...]


def _update(timers: Timers, timer_id: str, fn: Callable[[Timer], Timer]) -> Timers:
    return tuple(fn(t) if t.id == timer_id else t for t in timers)


def add(timers: Timers, *new: Timer) -> Timers:
    """Prepend ``new`` timers. Raises ValueError on a duplicate id."""
    existing = {t.id for t in timers}
    for timer in new:
        if timer.id in existing:
            raise ValueError(f"duplicate timer id {timer.id!r}")
        existing.add(timer.id)
    return (*new, *timers)


def find(timers: Iterable[Timer], timer_id: str) -> Timer | None:
    for timer in timers:
        if timer.id == timer_id:
            return timer
    return None


def any_enabled(timers: Iterable[Timer]) -> bool:
    return any(t.enabled for t in timers)


def set_enabled(timers: Timers, timer_id: str, enabled: bool) -> Timers:
    return _update(timers, timer_id, lambda t: replace(t, enabled=enabled))


def toggle(timers: Timers, timer_id: str) -> Timers:
    return _update(timers, timer_id, lambda t: replace(t, enabled=not t.enabled))


def delete(timers: Timers, timer_id: str) -> Timers:
    return tuple(t for t in timers if t.id != timer_id)


def set_tod(timers: Timers, timer_id: str, base_earth_ms: int) -> Timers:
    """Re-anchor an NM timer at a new time of death and re-enable it.

    Lottery timers also drop any recorded placeholder. Other kinds are left
    untouched.
    """

    def apply(timer: Timer) -> Timer:
        if isinstance(timer, NmTimedWindowTimer):
            return replace(timer, base_earth_ms=base_earth_ms, enabled=True)
        if isinstance(timer, NmLotteryTimer):
            return replace(timer, base_earth_ms=base_earth_ms, ph_next_at_ms=None, enabled=True)
        return timer

    return _update(timers, timer_id, apply)


def record_placeholder_kill(timers: Timers, timer_id: str, now_ms: int) -> Timers:
    def apply(timer: Timer) -> Timer:
        if not isinstance(timer, NmLotteryTimer):
            return timer
        return replace(timer, ph_next_at_ms=now_ms + timer.ph_respawn_ms, enabled=True)

    return _update(timers, timer_id, apply)


def clear_placeholder(timers: Timers, timer_id: str) -> Timers:
    def apply(timer: Timer) -> Timer:
        if not isinstance(timer, NmLotteryTimer):
            return timer
        return replace(timer, ph_next_at_ms=None)

    return _update(timers, timer_id, apply)


def advance_day(timers: Timers, timer_id: str, now_ms: int) -> Timers:
    """Roll a fired EARTH_TIME timer to its next daily occurrence."""

    def apply(timer: Timer) -> Timer:
        if not isinstance(timer, EarthTimer):
            return timer
        return replace(timer, target_earth_ms=next_occurrence(timer.target_earth_ms, now_ms))

    return _update(timers, timer_id, apply)
