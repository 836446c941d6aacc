"""Wall-clock source and tick baseline for the polling loop."""
from __future__ import annotations

import time
from typing import Callable


def wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def effective_previous_tick(previous_ms: int | None, now_ms: int, max_catchup_ms: int) -> int:
    """Baseline a tick scans forward from.

    Never further back than ``max_catchup_ms`` and never after ``now_ms``.
    The first tick starts at ``now_ms``.
    """
    if previous_ms is None or previous_ms > now_ms:
        return now_ms
    if now_ms - previous_ms > max_catchup_ms:
        return now_ms - max_catchup_ms
    return previous_ms


class Clock:
    def __init__(self, tick_interval_ms: int = 250, source: Callable[[], int] | None = None) -> None:
        if tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive")
        self._tick_interval_ms = tick_interval_ms
        self._dt = tick_interval_ms / 1000
        self._source = source if source is not None else wall_clock_ms
        self._tick_number = 0

    @property
    def tick_interval_ms(self) -> int:
        return self._tick_interval_ms

    @property
    def dt(self) -> float:
        """Tick interval in seconds."""
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    def now_ms(self) -> int:
        return self._source()

    def advance(self) -> int:
        self._tick_number += 1
        return self._tick_number

    def reset(self, tick_number: int = 0) -> None:
        self._tick_number = tick_number
