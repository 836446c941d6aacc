"""vana-signal - Effect bus and notification collaborators."""
from __future__ import annotations

from vana_signal.bus import SignalBus
from vana_signal.notify import (
    KEEP_AWAKE_SIGNAL,
    NOTIFY_SIGNAL,
    STOP_SIGNAL,
    KeepAwake,
    Notification,
    Notifier,
    RecordingKeepAwake,
    RecordingNotifier,
    connect_notifier,
)

__all__ = [
    "SignalBus",
    "Notifier",
    "KeepAwake",
    "Notification",
    "RecordingNotifier",
    "RecordingKeepAwake",
    "connect_notifier",
    "NOTIFY_SIGNAL",
    "STOP_SIGNAL",
    "KEEP_AWAKE_SIGNAL",
]
