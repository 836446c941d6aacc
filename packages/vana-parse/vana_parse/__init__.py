"""vana-parse - Date-time and duration parsing, countdown formatting."""
from __future__ import annotations

from vana_parse.formatting import format_clock, format_countdown
from vana_parse.parsers import parse_duration, parse_local_datetime

__all__ = [
    "parse_local_datetime",
    "parse_duration",
    "format_countdown",
    "format_clock",
]
