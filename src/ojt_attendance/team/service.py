from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.model import DayRecord
from ..attendance.repository import DayRecordRepository
from ..common.datetime_utils import now_local
from ..core.constants import PROGRESS_HISTORY_LIMIT
from ..core.enums import RosterStatus
from ..progress.model import ProgressView
from ..progress.service import ProgressService
from .model import Roster, RosterRow, RosterSummary, Trainee


class TeamService:
    """Supervisor views across several trainees."""

    def __init__(self, records: DayRecordRepository, progress: ProgressService):
        self._records = records
        self._progress = progress

    def roster(self, trainees: Sequence[Trainee], *, work_date: date, now: datetime | None = None) -> Roster:
        now = now or now_local()
        logs = self._records.list_for_date(work_date, [t.user_id for t in trainees])
        by_user = {r.user_id: r for r in logs}

        rows = [self._row(t, by_user.get(t.user_id), now=now) for t in trainees]

        hours = [r.total_hours for r in rows if r.total_hours is not None]
        summary = RosterSummary(
            total_trainees=len(trainees),
            timed_in=sum(1 for r in rows if r.time_in),
            missing_time_out=sum(1 for r in rows if r.status == RosterStatus.MISSING_TIME_OUT),
            avg_hours=round(sum(hours) / len(hours), 2) if hours else 0.0,
        )
        return Roster(rows=rows, summary=summary)

    def trainee_progress(self, trainee: Trainee, *, now: datetime | None = None) -> ProgressView:
        now = now or now_local()
        rows = self._records.query(trainee.user_id, limit=PROGRESS_HISTORY_LIMIT)
        return self._progress.progress_for(rows, now=now, target_hours=trainee.required_hours)

    def _row(self, trainee: Trainee, log: Optional[DayRecord], *, now: datetime) -> RosterRow:
        if log is None:
            status = RosterStatus.ABSENT
            total_hours = None
        else:
            status = RosterStatus.COMPLETE if log.time_out else RosterStatus.MISSING_TIME_OUT
            minutes = self._progress.daily_minutes(log, now=now)
            total_hours = round((minutes or 0.0) / 60, 2)

        return RosterRow(
            user_id=trainee.user_id,
            name=trainee.name or "-",
            status=status,
            time_in=log.time_in if log else None,
            time_out=log.time_out if log else None,
            total_hours=total_hours,
            work_notes=log.work_notes if log else None,
        )
