from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..attendance.context import AttendanceContext
from ..attendance.factory import DurationStrategyFactory
from ..attendance.model import DayRecord
from ..attendance.repository import DayRecordRepository
from ..attendance.state_machine import day_status, session_hours
from ..common.datetime_utils import now_local, trailing_window
from ..core.constants import DEFAULT_TARGET_HOURS, PROGRESS_HISTORY_LIMIT, WEEKLY_WINDOW_DAYS
from ..core.enums import DayStatus
from .model import ProgressView, TodayStatusView, WeeklySummary


def percent_of_target(current_minutes: float, target_hours: float) -> tuple[int, int, int]:
    """(completed, remaining, percent) with current clamped into [0, target]."""
    target_minutes = max(0.0, float(target_hours) * 60)
    current = max(0.0, min(float(current_minutes), target_minutes))
    remaining = max(target_minutes - current, 0.0)
    percent = 0 if target_minutes == 0 else int(math.floor(current / target_minutes * 100 + 0.5))
    return int(current), int(remaining), percent


class ProgressService:
    """Derived views over a user's day-records: today, trailing week, overall."""

    def __init__(
        self,
        records: DayRecordRepository,
        *,
        strategy_factory: DurationStrategyFactory | None = None,
        target_hours: float = DEFAULT_TARGET_HOURS,
        history_limit: int = PROGRESS_HISTORY_LIMIT,
    ):
        self._records = records
        self._factory = strategy_factory or DurationStrategyFactory()
        self._target_hours = float(target_hours)
        self._history_limit = int(history_limit)

    @property
    def target_hours(self) -> float:
        return self._target_hours

    def daily_minutes(self, record: DayRecord, *, now: datetime) -> Optional[float]:
        """Worked minutes for one record, or None when it cannot be derived."""
        strategy = self._factory.for_record(record, today=now.date())
        return strategy.minutes(record, now=now)

    def sum_minutes(self, records: Iterable[DayRecord], *, now: datetime) -> float:
        total = 0.0
        for r in records:
            minutes = self.daily_minutes(r, now=now)
            if minutes is not None:
                total += minutes
        return total

    def today_status(self, ctx: AttendanceContext, *, now: datetime | None = None) -> TodayStatusView:
        now = now or now_local()
        user_id = ctx.require_user_id()
        record = self._records.get(user_id, now.date())
        status = day_status(record)

        if status == DayStatus.NOT_STARTED or record is None or record.time_in_at is None:
            return TodayStatusView(status=DayStatus.NOT_STARTED)

        if status == DayStatus.IN_PROGRESS:
            elapsed = max(0, int((now - record.time_in_at).total_seconds() // 60))
            return TodayStatusView(status=status, time_in=record.time_in, elapsed_minutes=elapsed)

        time_out_at = record.time_out_at
        total = session_hours(record.time_in_at, time_out_at) if time_out_at else record.total_hours
        return TodayStatusView(status=status, time_in=record.time_in, time_out=record.time_out, total_hours=total)

    def weekly_summary(self, ctx: AttendanceContext, *, now: datetime | None = None) -> WeeklySummary:
        now = now or now_local()
        user_id = ctx.require_user_id()
        start, end = trailing_window(now.date(), WEEKLY_WINDOW_DAYS)
        rows = self._records.query(user_id, start=start, end=end, limit=WEEKLY_WINDOW_DAYS)
        return self.summarize_week(rows, now=now)

    def summarize_week(self, rows: Sequence[DayRecord], *, now: datetime) -> WeeklySummary:
        start, end = trailing_window(now.date(), WEEKLY_WINDOW_DAYS)
        in_range = [r for r in rows if start <= r.work_date <= end]

        total = self.sum_minutes(in_range, now=now)
        days = len({r.work_date for r in in_range if r.time_in})
        avg = total / 60 / days if days else 0.0
        return WeeklySummary(total_minutes=total, days_attended=days, avg_hours_per_day=avg)

    def cumulative_progress(
        self,
        ctx: AttendanceContext,
        *,
        now: datetime | None = None,
        target_hours: float | None = None,
    ) -> ProgressView:
        now = now or now_local()
        user_id = ctx.require_user_id()
        rows = self._records.query(user_id, limit=self._history_limit)
        return self.progress_for(rows, now=now, target_hours=target_hours)

    def progress_for(
        self,
        rows: Sequence[DayRecord],
        *,
        now: datetime,
        target_hours: float | None = None,
    ) -> ProgressView:
        target = self._target_hours if target_hours is None else float(target_hours)
        current = math.floor(self.sum_minutes(rows, now=now))
        completed, remaining, percent = percent_of_target(current, target)
        return ProgressView(
            completed_minutes=completed,
            remaining_minutes=remaining,
            percent=percent,
            target_hours=target,
        )
