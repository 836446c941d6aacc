"""Countdown and clock formatting."""
from __future__ import annotations


def format_countdown(ms: float) -> str:
    """``HH:MM:SS``, or ``Xh MMm SSs`` once past 99 hours. Negatives read as zero."""
    total_seconds = max(0, int(ms)) // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 99:
        return f"{hours}h {minutes:02d}m {seconds:02d}s"
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_clock(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"
