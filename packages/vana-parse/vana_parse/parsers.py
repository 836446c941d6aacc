"""Free-text parsers for real-world date-times and durations."""
from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Optional

_NUMBER = r"-?\d+(?:\.\d+)?"
_NUMBER_RE = re.compile(rf"^{_NUMBER}$")
_UNIT_MS = {"h": 3_600_000, "m": 60_000, "s": 1000}
_COMPOSITE_RE = re.compile(rf"^(?:\s*{_NUMBER}\s*[hms])+\s*$", re.IGNORECASE)
_COMPONENT_RE = re.compile(rf"({_NUMBER})\s*([hms])", re.IGNORECASE)

_ISO_LOCAL_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")
# 12/31/2024 11:30:00 PM, also with "-" separators or a comma/T before the time
_US_RE = re.compile(
    r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})[ ,T]+(\d{1,2}):(\d{2})(?::(\d{2}))?\s*(AM|PM)?$",
    re.IGNORECASE,
)
_YMD_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})[ T]+(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def _epoch_ms(dt: datetime, tz: tzinfo | None) -> int:
    if dt.tzinfo is None and tz is not None:
        dt = dt.replace(tzinfo=tz)
    # naive datetimes are taken as local time
    return int(dt.timestamp()) * 1000 + dt.microsecond // 1000


def _from_fields(tz: tzinfo | None, *fields: int) -> Optional[int]:
    try:
        return _epoch_ms(datetime(*fields), tz)
    except (ValueError, OverflowError):
        return None


def parse_local_datetime(raw: str | None, tz: tzinfo | None = None) -> Optional[int]:
    """Parse a date-time typed or pasted by the user into epoch ms.

    Accepts ``YYYY-MM-DDTHH:MM[:SS]``, ``YYYY-MM-DD HH:MM[:SS]`` and
    ``MM/DD/YYYY HH:MM[:SS] [AM|PM]``, then falls back to ISO 8601. Values
    without an explicit offset are read in ``tz``, or local time when ``tz``
    is None. Returns None when nothing matches.
    """
    if not raw:
        return None
    s = raw.strip()
    if not s:
        return None

    if _ISO_LOCAL_RE.match(s):
        try:
            return _epoch_ms(datetime.fromisoformat(s), tz)
        except (ValueError, OverflowError):
            pass

    m = _US_RE.match(s)
    if m:
        month, day, year, hour, minute = (int(g) for g in m.group(1, 2, 3, 4, 5))
        second = int(m.group(6) or 0)
        meridiem = (m.group(7) or "").upper()
        if meridiem == "AM" and hour == 12:
            hour = 0
        elif meridiem == "PM" and hour != 12:
            hour += 12
        ms = _from_fields(tz, year, month, day, hour, minute, second)
        if ms is not None:
            return ms

    m = _YMD_RE.match(s)
    if m:
        year, month, day, hour, minute = (int(g) for g in m.group(1, 2, 3, 4, 5))
        ms = _from_fields(tz, year, month, day, hour, minute, int(m.group(6) or 0))
        if ms is not None:
            return ms

    try:
        return _epoch_ms(datetime.fromisoformat(s), tz)
    except (ValueError, OverflowError):
        return None


def parse_duration(raw: str | None) -> Optional[int]:
    """Parse a duration into ms.

    Supported: ``H:MM:SS``, ``MM:SS``, ``2h``, ``2.5h``, ``5m``, ``10s`` and
    composites such as ``1h45m55s`` in any unit order. Negative or malformed
    input returns None.
    """
    if not raw:
        return None
    s = raw.strip()
    if not s:
        return None

    if ":" in s:
        parts = [p.strip() for p in s.split(":")]
        if not all(_NUMBER_RE.match(p) for p in parts):
            return None
        values = [float(p) for p in parts]
        if len(values) == 3:
            seconds = values[0] * 3600 + values[1] * 60 + values[2]
        elif len(values) == 2:
            seconds = values[0] * 60 + values[1]
        else:
            return None
        return round(seconds * 1000) if seconds >= 0 else None

    if not _COMPOSITE_RE.match(s):
        return None
    total = 0.0
    for number, unit in _COMPONENT_RE.findall(s):
        value = float(number)
        if value < 0:
            return None
        total += value * _UNIT_MS[unit.lower()]
    return round(total)
