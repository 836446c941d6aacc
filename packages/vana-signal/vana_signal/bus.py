"""In-memory pub/sub bus with per-tick flush and handler error isolation."""
from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

_Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Queues signals during a tick and delivers them on ``flush``.

    A handler that raises is logged and skipped; remaining handlers and
    signals are still delivered.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[_Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: _Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: _Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def publish(self, signal_name: str, **data: Any) -> None:
        self._queue.append((signal_name, data))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def flush(self) -> int:
        """Deliver queued signals; returns how many handler calls failed."""
        snapshot = self._queue
        self._queue = []
        failures = 0
        for signal_name, data in snapshot:
            for handler in list(self._subscribers.get(signal_name, [])):
                try:
                    handler(signal_name, data)
                except Exception:
                    failures += 1
                    logger.exception("Handler %r failed for signal %r", handler, signal_name)
        return failures

    def clear(self) -> None:
        self._queue.clear()
