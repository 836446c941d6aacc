"""Due-time dispatch: the next notification event for each timer kind."""
from __future__ import annotations

import math

from vana_calendar import (
    Calibration,
    next_earth_ms_for_moon_percent,
    next_earth_ms_for_moon_step,
    next_earth_ms_for_weekday_time,
)

from vana_timer.types import (
    EARTH_DAY_MS,
    EXPIRY_GRACE_MS,
    EarthTimer,
    MoonPercentTimer,
    MoonStepTimer,
    NmLotteryTimer,
    NmTimedWindowTimer,
    PostFire,
    Timer,
    TimerEvent,
    WeekdayTimer,
)

NOTIFICATION_TITLE = "FFXI Timer"


def non_negative_int(value: float) -> int:
    """Floor to an int, mapping negatives and non-finite values to 0."""
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, math.floor(value))


def _seconds(ms: int) -> int:
    return (ms + 500) // 1000


def next_occurrence(target_ms: int, now_ms: int) -> int:
    """``target_ms`` advanced by whole days until it is after ``now_ms``."""
    if target_ms > now_ms:
        return target_ms
    days = (now_ms - target_ms) // EARTH_DAY_MS + 1
    return target_ms + days * EARTH_DAY_MS


def next_timed_window_pop(
    now_ms: int, base_ms: int, start_offset_ms: int, end_offset_ms: int, interval_ms: int
) -> int | None:
    """Next pop check at or after ``now_ms``, or None once past the window."""
    start_at = base_ms + start_offset_ms
    end_at = base_ms + end_offset_ms
    interval = max(1, interval_ms)

    if now_ms <= start_at:
        return start_at

    at = start_at + ((now_ms - start_at) // interval) * interval
    if at < now_ms:
        at += interval
    if at > end_at:
        return None
    return at


def next_timed_window_event(
    timer: NmTimedWindowTimer, now_ms: int, title: str = NOTIFICATION_TITLE
) -> TimerEvent | None:
    base = non_negative_int(timer.base_earth_ms)
    start = non_negative_int(timer.window_start_offset_ms)
    end = non_negative_int(timer.window_end_offset_ms)
    interval = non_negative_int(timer.interval_ms)
    warn_lead = non_negative_int(timer.warn_lead_ms)

    if end < start or interval <= 0:
        return None
    if now_ms > base + end + EXPIRY_GRACE_MS:
        return None

    pop_at = next_timed_window_pop(now_ms, base, start, end, interval)
    if pop_at is None:
        return None

    warn_at = max(base, pop_at - warn_lead)
    if warn_lead > 0 and warn_at > now_ms:
        return TimerEvent(
            due_at_ms=warn_at,
            title=title,
            body=f"{timer.label} - pop check in {_seconds(warn_lead)}s. (click to stop)",
            dedup_key=f"pop:warn:{pop_at}",
            repeat=False,
        )
    return TimerEvent(
        due_at_ms=pop_at,
        title=title,
        body=f"{timer.label} - pop check NOW. (click to stop)",
        dedup_key=f"pop:now:{pop_at}",
        repeat=False,
    )


def next_lottery_event(
    timer: NmLotteryTimer, now_ms: int, title: str = NOTIFICATION_TITLE
) -> TimerEvent | None:
    """Earliest of the window-open and placeholder-respawn alerts.

    Each family contributes a warning while its warn instant is still ahead
    and the alert itself while it is not yet past. The window family stops
    once ``now`` is more than a minute past the opening.
    """
    base = non_negative_int(timer.base_earth_ms)
    warn_lead = non_negative_int(timer.warn_lead_ms)
    lead_s = _seconds(warn_lead)
    candidates: list[TimerEvent] = []

    open_at = base + non_negative_int(timer.window_start_offset_ms)
    if now_ms <= open_at + EXPIRY_GRACE_MS:
        warn_at = max(base, open_at - warn_lead)
        if warn_lead > 0 and warn_at > now_ms:
            candidates.append(
                TimerEvent(
                    due_at_ms=warn_at,
                    title=title,
                    body=f"{timer.label} - window opens in {lead_s}s. (click to stop)",
                    dedup_key=f"window:warn:{open_at}",
                    repeat=False,
                )
            )
        if open_at >= now_ms:
            candidates.append(
                TimerEvent(
                    due_at_ms=open_at,
                    title=title,
                    body=f"{timer.label} - WINDOW OPEN. (click to stop)",
                    dedup_key=f"window:open:{open_at}",
                    repeat=False,
                )
            )

    if timer.ph_next_at_ms is not None:
        ph_at = non_negative_int(timer.ph_next_at_ms)
        if now_ms <= ph_at + EXPIRY_GRACE_MS:
            warn_at = max(base, ph_at - warn_lead)
            if warn_lead > 0 and warn_at > now_ms:
                candidates.append(
                    TimerEvent(
                        due_at_ms=warn_at,
                        title=title,
                        body=f"{timer.label} - PH pops in {lead_s}s. (click to stop)",
                        dedup_key=f"ph:warn:{ph_at}",
                        repeat=False,
                    )
                )
            if ph_at >= now_ms:
                candidates.append(
                    TimerEvent(
                        due_at_ms=ph_at,
                        title=title,
                        body=f"{timer.label} - PH POP NOW. (click to stop)",
                        dedup_key=f"ph:pop:{ph_at}",
                        repeat=False,
                        post_fire=PostFire.CLEAR_PLACEHOLDER,
                    )
                )

    if not candidates:
        return None
    return min(candidates, key=lambda e: e.due_at_ms)


def due_at(timer: Timer, now_ms: int, cal: Calibration | None = None) -> int:
    """Next due instant for the single-deadline kinds."""
    if isinstance(timer, WeekdayTimer):
        return next_earth_ms_for_weekday_time(
            now_ms, cal, timer.target_weekday, timer.target_hour, timer.target_minute
        )
    if isinstance(timer, MoonStepTimer):
        return next_earth_ms_for_moon_step(now_ms, cal, timer.target_moon_step)
    if isinstance(timer, MoonPercentTimer):
        return next_earth_ms_for_moon_percent(now_ms, cal, timer.target_percent)
    if isinstance(timer, EarthTimer):
        return timer.target_earth_ms
    raise TypeError(f"{type(timer).__name__} has no single due time")


def next_event(
    timer: Timer,
    now_ms: int,
    cal: Calibration | None = None,
    title: str = NOTIFICATION_TITLE,
) -> TimerEvent | None:
    """The timer's next event relative to ``now_ms``; None if it has none."""
    if not timer.enabled:
        return None
    if isinstance(timer, NmTimedWindowTimer):
        return next_timed_window_event(timer, now_ms, title)
    if isinstance(timer, NmLotteryTimer):
        return next_lottery_event(timer, now_ms, title)

    return TimerEvent(
        due_at_ms=due_at(timer, now_ms, cal),
        title=title,
        body=f"{timer.label} is due now! (click to stop)",
        dedup_key="due",
        repeat=True,
        post_fire=PostFire.ADVANCE_DAY if isinstance(timer, EarthTimer) else None,
    )


def window_expired(timer: Timer, now_ms: int) -> bool:
    """True once an NM window is more than the grace period past its end."""
    if not isinstance(timer, NmTimedWindowTimer):
        return False
    end_at = non_negative_int(timer.base_earth_ms) + non_negative_int(timer.window_end_offset_ms)
    return now_ms > end_at + EXPIRY_GRACE_MS


def placeholder_expired(timer: Timer, now_ms: int) -> bool:
    """True once a recorded placeholder respawn is past the grace period."""
    if not isinstance(timer, NmLotteryTimer) or timer.ph_next_at_ms is None:
        return False
    return now_ms > timer.ph_next_at_ms + EXPIRY_GRACE_MS
