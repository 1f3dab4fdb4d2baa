from datetime import date, datetime

from ojt_attendance.attendance.memory_day_record_repository import InMemoryDayRecordRepository
from ojt_attendance.core.enums import RosterStatus
from ojt_attendance.progress.service import ProgressService
from ojt_attendance.team.model import Trainee
from ojt_attendance.team.service import TeamService

D = date(2024, 3, 7)
NOW = datetime(2024, 3, 7, 18, 0, 0)


def _service():
    repo = InMemoryDayRecordRepository(clock=lambda: NOW)
    return TeamService(repo, ProgressService(repo)), repo


def test_roster_statuses_and_summary():
    svc, repo = _service()
    repo.upsert("a", D, {"time_in": "08:00:00", "time_out": "17:00:00", "work_notes": "done"})
    repo.upsert("b", D, {"time_in": "09:00:00", "time_out": "12:00:00", "total_hours": 3.0})
    repo.upsert("c", date(2024, 3, 6), {"time_in": "09:00:00", "time_out": "12:00:00"})

    trainees = [Trainee("a", "Ana"), Trainee("b", "Ben"), Trainee("c", "Cy"), Trainee("d")]
    roster = svc.roster(trainees, work_date=D, now=NOW)

    by_id = {r.user_id: r for r in roster.rows}
    assert by_id["a"].status == RosterStatus.COMPLETE
    assert by_id["a"].total_hours == 9.0
    assert by_id["a"].work_notes == "done"
    assert by_id["b"].total_hours == 3.0
    assert by_id["c"].status == RosterStatus.ABSENT
    assert by_id["c"].total_hours is None
    assert by_id["d"].name == "-"

    assert roster.summary.total_trainees == 4
    assert roster.summary.timed_in == 2
    assert roster.summary.missing_time_out == 0
    assert roster.summary.avg_hours == 6.0


def test_open_session_is_missing_time_out():
    svc, repo = _service()
    repo.upsert("a", D, {"time_in": "16:00:00"})

    roster = svc.roster([Trainee("a", "Ana")], work_date=D, now=NOW)

    assert roster.rows[0].status == RosterStatus.MISSING_TIME_OUT
    assert roster.rows[0].total_hours == 2.0
    assert roster.summary.missing_time_out == 1


def test_trainee_progress_uses_required_hours():
    svc, repo = _service()
    repo.upsert("a", D, {"time_in": "08:00:00", "time_out": "18:00:00"})

    assert svc.trainee_progress(Trainee("a", required_hours=20), now=NOW).percent == 50
    assert svc.trainee_progress(Trainee("a"), now=NOW).target_hours == 486
