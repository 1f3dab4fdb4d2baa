from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import DayStatus
from ..core.exceptions import AlreadyCompletedToday, NoOpenSession, SessionAlreadyOpen
from .model import DayRecord


def day_status(record: Optional[DayRecord]) -> DayStatus:
    if record is None:
        return DayStatus.NOT_STARTED
    if record.time_out:
        return DayStatus.COMPLETED
    if record.time_in:
        return DayStatus.IN_PROGRESS
    return DayStatus.NOT_STARTED


def ensure_can_clock_in(record: Optional[DayRecord]) -> None:
    status = day_status(record)
    if status == DayStatus.COMPLETED:
        raise AlreadyCompletedToday()
    if status == DayStatus.IN_PROGRESS:
        raise SessionAlreadyOpen()


def ensure_can_clock_out(record: Optional[DayRecord]) -> None:
    if day_status(record) != DayStatus.IN_PROGRESS:
        raise NoOpenSession()


def session_hours(time_in_at: Optional[datetime], time_out_at: datetime) -> Optional[float]:
    """Whole-session length in hours, 2 decimals, never negative; None if time_in is unreadable."""
    if time_in_at is None:
        return None
    hours = (time_out_at - time_in_at).total_seconds() / 3600
    return round(max(0.0, hours), 2)
