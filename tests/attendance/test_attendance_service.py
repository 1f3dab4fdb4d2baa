from __future__ import annotations

import math
from datetime import date, datetime

import pytest

from ojt_attendance.attendance.context import AttendanceContext
from ojt_attendance.attendance.geofence import DEFAULT_SITE, Coordinate
from ojt_attendance.attendance.memory_day_record_repository import InMemoryDayRecordRepository
from ojt_attendance.attendance.service import AttendanceService
from ojt_attendance.core.constants import EARTH_RADIUS_METERS
from ojt_attendance.core.enums import DayStatus
from ojt_attendance.core.exceptions import (
    AlreadyCompletedToday,
    LocationUnavailable,
    NoOpenSession,
    OperationInProgress,
    OutOfRange,
    SessionAlreadyOpen,
    StoreWriteFailed,
    Unauthenticated,
)

DAY = date(2024, 3, 1)
AT_9 = datetime(2024, 3, 1, 9, 0, 0)
AT_1730 = datetime(2024, 3, 1, 17, 30, 0)
USER = AttendanceContext(user_id="trainee-1")


def _north_of(meters: float) -> Coordinate:
    c = DEFAULT_SITE.center
    return Coordinate(c.lat + math.degrees(meters / EARTH_RADIUS_METERS), c.lng)


class FixedLocator:
    def __init__(self, position: Coordinate | None):
        self.position = position
        self.calls = []

    def get_current_position(self, *, high_accuracy: bool, timeout_s: float) -> Coordinate:
        self.calls.append((high_accuracy, timeout_s))
        if self.position is None:
            raise LocationUnavailable()
        return self.position


class FlakyRepo(InMemoryDayRecordRepository):
    """Fails the next N writes, then behaves."""

    def __init__(self, failures: int = 1):
        super().__init__(clock=lambda: AT_9)
        self.failures = failures
        self.sent = []

    def upsert(self, user_id, work_date, fields):
        self.sent.append(dict(fields))
        if self.failures:
            self.failures -= 1
            raise StoreWriteFailed()
        return super().upsert(user_id, work_date, fields)


def _service(repo=None):
    repo = repo or InMemoryDayRecordRepository(clock=lambda: AT_9)
    return AttendanceService(repo), repo


def _clocked_in(repo=None):
    svc, repo = _service(repo)
    svc.clock_in(USER, locator=FixedLocator(DEFAULT_SITE.center), now=AT_9)
    return svc, repo


def test_clock_in_from_site_starts_session():
    svc, repo = _service()
    locator = FixedLocator(_north_of(100))

    rec = svc.clock_in(USER, locator=locator, now=AT_9)

    assert rec.time_in == "09:00:00"
    assert rec.time_out is None
    assert svc.status(USER, now=AT_9) == DayStatus.IN_PROGRESS
    assert locator.calls == [(True, 10.0)]


def test_clock_in_does_not_touch_notes():
    svc, repo = _service()
    repo.upsert(USER.user_id, DAY, {"work_notes": "prep"})

    rec = svc.clock_in(USER, locator=FixedLocator(DEFAULT_SITE.center), now=AT_9)

    assert rec.work_notes == "prep"


def test_clock_in_out_of_range_writes_nothing():
    svc, repo = _service()

    with pytest.raises(OutOfRange) as exc:
        svc.clock_in(USER, locator=FixedLocator(_north_of(1500)), now=AT_9)

    assert exc.value.distance_meters == pytest.approx(1500)
    assert "1500m" in str(exc.value)
    assert repo.write_count == 0


def test_clock_in_without_location_is_denied():
    svc, repo = _service()

    with pytest.raises(LocationUnavailable):
        svc.clock_in(USER, locator=FixedLocator(None), now=AT_9)
    assert repo.write_count == 0


def test_clock_in_requires_identity():
    svc, repo = _service()
    locator = FixedLocator(DEFAULT_SITE.center)

    with pytest.raises(Unauthenticated):
        svc.clock_in(AttendanceContext(user_id=None), locator=locator, now=AT_9)
    assert locator.calls == []


def test_second_clock_in_is_rejected_without_write():
    svc, repo = _clocked_in()
    writes = repo.write_count

    with pytest.raises(SessionAlreadyOpen):
        svc.clock_in(USER, locator=FixedLocator(DEFAULT_SITE.center), now=datetime(2024, 3, 1, 10, 0))

    assert repo.write_count == writes
    assert repo.get(USER.user_id, DAY).time_in == "09:00:00"
    assert len(repo.query(USER.user_id, limit=60)) == 1


def test_clock_in_after_completed_day_is_rejected_before_locating():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=AT_1730)
    svc.confirm_clock_out(USER, pending.token, now=AT_1730)
    locator = FixedLocator(DEFAULT_SITE.center)

    with pytest.raises(AlreadyCompletedToday):
        svc.clock_in(USER, locator=locator, now=datetime(2024, 3, 1, 18, 0))

    assert locator.calls == []


def test_new_day_starts_not_started():
    svc, repo = _clocked_in()
    assert svc.status(USER, now=datetime(2024, 3, 2, 8, 0)) == DayStatus.NOT_STARTED


def test_clock_out_records_duration():
    svc, repo = _clocked_in()

    pending = svc.request_clock_out(USER, now=AT_1730)
    rec = svc.confirm_clock_out(USER, pending.token, now=AT_1730)

    assert rec.time_in == "09:00:00"
    assert rec.time_out == "17:30:00"
    assert rec.total_hours == 8.5
    assert svc.status(USER, now=AT_1730) == DayStatus.COMPLETED


def test_clock_out_without_open_session_is_rejected():
    svc, repo = _clocked_in()
    other = AttendanceContext(user_id="trainee-2")

    with pytest.raises(NoOpenSession):
        svc.request_clock_out(other, now=AT_1730)


def test_confirm_is_idempotent():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=AT_1730)

    first = svc.confirm_clock_out(USER, pending.token, now=AT_1730)
    writes = repo.write_count
    second = svc.confirm_clock_out(USER, pending.token, now=datetime(2024, 3, 1, 17, 31))

    assert second == first
    assert repo.write_count == writes


def test_confirm_rechecks_session_closed_elsewhere():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=AT_1730)
    repo.upsert(USER.user_id, DAY, {"time_out": "17:00:00"})

    with pytest.raises(NoOpenSession):
        svc.confirm_clock_out(USER, pending.token, now=AT_1730)

    assert repo.get(USER.user_id, DAY).time_out == "17:00:00"


def test_confirm_after_day_rollover_is_rejected():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=datetime(2024, 3, 1, 23, 59, 50))

    with pytest.raises(NoOpenSession):
        svc.confirm_clock_out(USER, pending.token, now=datetime(2024, 3, 2, 0, 0, 5))


def test_confirm_with_foreign_token_is_rejected():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=AT_1730)

    with pytest.raises(NoOpenSession):
        svc.confirm_clock_out(AttendanceContext(user_id="someone-else"), pending.token, now=AT_1730)


def test_cancel_before_confirm_aborts_request():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=AT_1730)

    assert svc.cancel_clock_out(USER, pending.token) is True
    with pytest.raises(NoOpenSession):
        svc.confirm_clock_out(USER, pending.token, now=AT_1730)
    assert svc.status(USER, now=AT_1730) == DayStatus.IN_PROGRESS


def test_cancel_after_confirm_has_no_effect():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=AT_1730)
    svc.confirm_clock_out(USER, pending.token, now=AT_1730)

    assert svc.cancel_clock_out(USER, pending.token) is False
    assert svc.status(USER, now=AT_1730) == DayStatus.COMPLETED


def test_cancel_racing_confirm_cannot_report_success_and_still_write():
    cancelled = []

    class CancelDuringReadRepo(InMemoryDayRecordRepository):
        def get(self, user_id, work_date):
            if token and not cancelled:
                cancelled.append(svc.cancel_clock_out(USER, token))
            return super().get(user_id, work_date)

    token = None
    svc, repo = _clocked_in(CancelDuringReadRepo(clock=lambda: AT_9))
    token = svc.request_clock_out(USER, now=AT_1730).token

    rec = svc.confirm_clock_out(USER, token, now=AT_1730)

    assert cancelled == [False]
    assert rec.time_out == "17:30:00"


def test_cancel_before_confirm_reaches_the_lock_blocks_the_write():
    svc, repo = _clocked_in()
    pending = svc.request_clock_out(USER, now=AT_1730)
    writes = repo.write_count

    assert svc.cancel_clock_out(USER, pending.token) is True
    with pytest.raises(NoOpenSession):
        svc.confirm_clock_out(USER, pending.token, now=AT_1730)
    assert repo.write_count == writes
    assert repo.get(USER.user_id, DAY).time_out is None


def test_clock_out_with_unreadable_time_in_leaves_total_unknown():
    svc, repo = _service()
    repo.upsert(USER.user_id, DAY, {"time_in": "not-a-time"})
    pending = svc.request_clock_out(USER, now=AT_1730)

    rec = svc.confirm_clock_out(USER, pending.token, now=AT_1730)

    assert rec.time_out == "17:30:00"
    assert rec.total_hours is None
    rows = svc.get_history(USER, now=AT_1730)
    assert rows[0]["duration_minutes"] is None


def test_failed_clock_out_write_can_be_retried():
    repo = FlakyRepo(failures=0)
    svc, repo = _clocked_in(repo)
    pending = svc.request_clock_out(USER, now=AT_1730)
    repo.failures = 1

    with pytest.raises(StoreWriteFailed):
        svc.confirm_clock_out(USER, pending.token, now=AT_1730)
    assert repo.get(USER.user_id, DAY).time_out is None

    rec = svc.confirm_clock_out(USER, pending.token, now=AT_1730)
    assert rec.time_out == "17:30:00"


def test_clock_out_resends_time_in():
    repo = FlakyRepo(failures=0)
    svc, repo = _clocked_in(repo)
    pending = svc.request_clock_out(USER, now=AT_1730)

    svc.confirm_clock_out(USER, pending.token, now=AT_1730)

    last = repo.sent[-1]
    assert last["time_in"] == "09:00:00"
    assert last["time_out"] == "17:30:00"
    assert "work_notes" not in last


def test_concurrent_mutation_for_same_user_is_refused():
    svc, repo = _service()
    seen = []

    class ReentrantLocator(FixedLocator):
        def get_current_position(self, *, high_accuracy, timeout_s):
            try:
                svc.clock_in(USER, locator=FixedLocator(DEFAULT_SITE.center), now=AT_9)
            except OperationInProgress as e:
                seen.append(e)
            return super().get_current_position(high_accuracy=high_accuracy, timeout_s=timeout_s)

    svc.clock_in(USER, locator=ReentrantLocator(DEFAULT_SITE.center), now=AT_9)

    assert len(seen) == 1
    assert repo.write_count == 1


def test_history_lists_newest_first():
    svc, repo = _clocked_in()
    repo.upsert(USER.user_id, date(2024, 2, 29), {"time_in": "08:00:00", "time_out": "12:00:00", "work_notes": "x"})

    rows = svc.get_history(USER, now=datetime(2024, 3, 1, 10, 0))

    assert [r["date"] for r in rows] == ["2024-03-01", "2024-02-29"]
    assert rows[0]["status"] == "in-progress"
    assert rows[0]["duration_minutes"] == 60
    assert rows[1]["duration_minutes"] == 240
    assert rows[1]["note"] == "x"
