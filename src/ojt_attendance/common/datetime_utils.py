from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r}") from None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def trailing_window(today: date, days: int) -> tuple[date, date]:
    """Inclusive [today - (days-1), today] calendar window."""
    return today - timedelta(days=days - 1), today


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60
