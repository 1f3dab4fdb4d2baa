"""Conversion between stored wall-clock fragments and local instants.

Rows keep only a time of day (``HH:MM:SS``) next to the date key. Older rows
may hold ``HH:MM`` or a 12-hour ``hh:mm AM`` string.
"""
from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any, Optional

_LEGACY_FORMATS = (
    "%Y-%m-%d %I:%M:%S %p",
    "%Y-%m-%d %I:%M %p",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
)


def _pad_seconds(fragment: str) -> str:
    return f"{fragment}:00" if len(fragment) == 5 else fragment


def to_instant(date_key: Optional[str], fragment: Optional[str]) -> Optional[datetime]:
    """Combine a date key and a time fragment into a naive local datetime.

    Returns None for missing or unparseable input; never raises.
    """
    if not date_key or not fragment:
        return None

    date_key = str(date_key).strip()
    fragment = str(fragment).strip()
    try:
        return datetime.strptime(f"{date_key}T{_pad_seconds(fragment)}", "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        pass

    legacy = f"{date_key} {fragment}"
    for fmt in _LEGACY_FORMATS:
        try:
            return datetime.strptime(legacy, fmt)
        except ValueError:
            continue
    return None


def to_fragment(instant: datetime | time) -> str:
    return f"{instant.hour:02d}:{instant.minute:02d}:{instant.second:02d}"


def normalize_fragment(value: Any) -> Optional[str]:
    """Canonical ``HH:MM:SS`` for whatever the store handed back.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00' or legacy '8:30 AM')
    """
    if value is None or value == "":
        return None

    if isinstance(value, (time, datetime)):
        return to_fragment(value)

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return f"{total_seconds // 3600:02d}:{(total_seconds % 3600) // 60:02d}:{total_seconds % 60:02d}"

    parsed = to_instant("2000-01-01", str(value))
    return to_fragment(parsed) if parsed else None
