from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError
from .time_fragments import to_instant

# Columns a caller may name in a partial upsert.
DAY_FIELDS = ("time_in", "time_out", "total_hours", "work_notes", "created_at", "updated_at")


@dataclass(frozen=True)
class DayRecord:
    """Domain entity: one attendance row per (user, calendar date)."""

    user_id: str
    work_date: date
    time_in: Optional[str] = None
    time_out: Optional[str] = None
    total_hours: Optional[float] = None
    work_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def date_key(self) -> str:
        return self.work_date.strftime("%Y-%m-%d")

    @property
    def time_in_at(self) -> Optional[datetime]:
        return to_instant(self.date_key, self.time_in)

    @property
    def time_out_at(self) -> Optional[datetime]:
        return to_instant(self.date_key, self.time_out)

    @property
    def has_note(self) -> bool:
        return bool(self.work_notes and self.work_notes.strip())


@dataclass(frozen=True)
class PendingClockOut:
    """First phase of a clock-out, waiting for the user's confirmation."""

    token: str
    user_id: str
    work_date: date
    time_in: Optional[str]
    requested_at: datetime
    issued: bool = False
    result: Optional[DayRecord] = field(default=None, compare=False)


def merge_day_fields(
    existing: Optional[DayRecord],
    *,
    user_id: str,
    work_date: date,
    fields: Mapping[str, Any],
    now: datetime,
) -> DayRecord:
    """Field-level merge used by every store adapter.

    Fields absent from ``fields`` keep their stored value. ``updated_at`` is
    always refreshed; ``created_at`` is set on first insert.
    """
    unknown = set(fields) - set(DAY_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown day-record fields: {', '.join(sorted(unknown))}")

    base = existing or DayRecord(user_id=user_id, work_date=work_date)
    values = {
        "time_in": base.time_in,
        "time_out": base.time_out,
        "total_hours": base.total_hours,
        "work_notes": base.work_notes,
        "created_at": base.created_at,
        "updated_at": base.updated_at,
    }
    values.update(fields)

    if values["created_at"] is None:
        values["created_at"] = now
    values["updated_at"] = fields.get("updated_at") or now

    return DayRecord(user_id=user_id, work_date=work_date, **values)
