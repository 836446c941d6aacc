"""JSON-ready dict codec for timers (camelCase keys)."""
from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Iterable

from vana_calendar import Weekday

from vana_timer.types import TIMER_TYPES, Timer, TimerDecodeError, TimerKind

logger = logging.getLogger(__name__)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def timer_to_dict(timer: Timer) -> dict[str, Any]:
    data: dict[str, Any] = {"kind": timer.kind.value}
    for f in dataclasses.fields(timer):
        value = getattr(timer, f.name)
        if isinstance(value, Weekday):
            value = value.value
        data[_camel(f.name)] = value
    return data


def _check_value(kind: TimerKind, key: str, annotation: str, value: Any) -> Any:
    # Field annotations are strings under postponed evaluation.
    if value is None and annotation.endswith("| None"):
        return None
    base = annotation.removesuffix(" | None")
    if base == "int":
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise TimerDecodeError(f"{kind.value} timer field {key!r} must be a number, got {value!r}")
        return int(value)
    if base == "str" and not isinstance(value, str):
        raise TimerDecodeError(f"{kind.value} timer field {key!r} must be a string, got {value!r}")
    if base == "bool" and not isinstance(value, bool):
        raise TimerDecodeError(f"{kind.value} timer field {key!r} must be true or false, got {value!r}")
    return value


def timer_from_dict(data: Any) -> Timer:
    """Decode one stored record. Unknown keys are ignored.

    Raises:
        TimerDecodeError: Unknown kind, missing or mistyped field, or bad weekday.
    """
    if not isinstance(data, dict):
        raise TimerDecodeError(f"timer record must be an object, got {type(data).__name__}")
    try:
        kind = TimerKind(data.get("kind"))
    except ValueError:
        raise TimerDecodeError(f"unknown timer kind {data.get('kind')!r}") from None

    cls = TIMER_TYPES[kind]
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        key = _camel(f.name)
        if key in data:
            kwargs[f.name] = _check_value(kind, key, f.type, data[key])
        elif f.default is dataclasses.MISSING:
            raise TimerDecodeError(f"{kind.value} timer is missing {key!r}")

    if "target_weekday" in kwargs:
        try:
            kwargs["target_weekday"] = Weekday(kwargs["target_weekday"])
        except ValueError:
            raise TimerDecodeError(f"unknown weekday {kwargs['target_weekday']!r}") from None
    return cls(**kwargs)


def timers_to_list(timers: Iterable[Timer]) -> list[dict[str, Any]]:
    return [timer_to_dict(t) for t in timers]


def timers_from_list(records: Any) -> tuple[Timer, ...]:
    """Decode a stored collection, skipping records that fail to decode."""
    if not isinstance(records, list):
        if records is not None:
            logger.warning("Ignoring stored timers: expected a list, got %s", type(records).__name__)
        return ()

    timers: list[Timer] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        try:
            timer = timer_from_dict(record)
        except TimerDecodeError as exc:
            logger.warning("Skipping stored timer #%d: %s", index, exc)
            continue
        if timer.id in seen:
            logger.warning("Skipping stored timer #%d: duplicate id %r", index, timer.id)
            continue
        seen.add(timer.id)
        timers.append(timer)
    return tuple(timers)
