"""vana-store - Key-value persistence for calibration, timers and presets."""
from __future__ import annotations

from vana_store.persist import (
    CALIBRATION_KEY,
    PRESET_OFFSET_KEY,
    TIMERS_KEY,
    PersistedState,
    calibration_from_dict,
    calibration_to_dict,
    load_state,
    save_state,
)
from vana_store.store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "PersistedState",
    "load_state",
    "save_state",
    "calibration_to_dict",
    "calibration_from_dict",
    "CALIBRATION_KEY",
    "TIMERS_KEY",
    "PRESET_OFFSET_KEY",
]
