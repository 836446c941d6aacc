"""Polling loop configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

from vana_timer import NOTIFICATION_TITLE


@dataclass(frozen=True)
class ClockConfig:
    """Immutable configuration for the polling loop.

    Attributes:
        tick_interval_ms: Real ms between ticks.
        max_catchup_ms: Most missed time a single tick will scan through
            after a stall or suspend.
        refire_suppress_ms: Minimum gap before the same timer event may
            notify again.
        notification_title: Title used on every notification.
    """

    tick_interval_ms: int = 250
    max_catchup_ms: int = 5 * 60 * 1000
    refire_suppress_ms: int = 10_000
    notification_title: str = NOTIFICATION_TITLE
