"""Notification and keep-awake collaborators, and their bus wiring."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from vana_signal.bus import SignalBus

NOTIFY_SIGNAL = "timer_notify"
STOP_SIGNAL = "timer_stop"
KEEP_AWAKE_SIGNAL = "keep_awake"


class Notifier(Protocol):
    """Shows notifications. Re-showing ``repeat`` notifications until
    ``stop`` is called is the notifier's job, not the scheduler's."""

    def notify(self, timer_id: str, title: str, body: str, repeat: bool) -> None: ...

    def stop(self, timer_id: str) -> None: ...


class KeepAwake(Protocol):
    def set_keep_awake(self, enabled: bool) -> None: ...


@dataclass(frozen=True)
class Notification:
    timer_id: str
    title: str
    body: str
    repeat: bool


@dataclass
class RecordingNotifier:
    """Notifier that records calls. For tests and dry runs."""

    notifications: list[Notification] = field(default_factory=list)
    stopped: list[str] = field(default_factory=list)

    def notify(self, timer_id: str, title: str, body: str, repeat: bool) -> None:
        self.notifications.append(Notification(timer_id, title, body, repeat))

    def stop(self, timer_id: str) -> None:
        self.stopped.append(timer_id)


@dataclass
class RecordingKeepAwake:
    states: list[bool] = field(default_factory=list)

    def set_keep_awake(self, enabled: bool) -> None:
        self.states.append(enabled)

    @property
    def enabled(self) -> bool:
        return bool(self.states) and self.states[-1]


def connect_notifier(
    bus: SignalBus, notifier: Notifier, keep_awake: KeepAwake | None = None
) -> None:
    """Subscribe collaborators to the signals an engine publishes."""

    def on_notify(signal_name: str, data: dict[str, Any]) -> None:
        notifier.notify(data["timer_id"], data["title"], data["body"], data["repeat"])

    def on_stop(signal_name: str, data: dict[str, Any]) -> None:
        notifier.stop(data["timer_id"])

    bus.subscribe(NOTIFY_SIGNAL, on_notify)
    bus.subscribe(STOP_SIGNAL, on_stop)

    if keep_awake is not None:

        def on_keep_awake(signal_name: str, data: dict[str, Any]) -> None:
            keep_awake.set_keep_awake(data["enabled"])

        bus.subscribe(KEEP_AWAKE_SIGNAL, on_keep_awake)
