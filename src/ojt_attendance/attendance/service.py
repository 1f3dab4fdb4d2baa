from __future__ import annotations

import logging
from datetime import datetime

from ..common.datetime_utils import now_local
from ..core.constants import ATTENDANCE_HISTORY_LIMIT, GEOLOCATION_TIMEOUT_SECONDS
from ..core.exceptions import NoOpenSession, OutOfRange, StoreError
from ..core.enums import DayStatus
from .context import AttendanceContext
from .factory import DurationStrategyFactory
from .geofence import DEFAULT_SITE, Site, distance_meters
from .geolocation import GeolocationProvider
from .locks import UserLocks
from .model import DayRecord, PendingClockOut
from .pending import PendingClockOutRegistry
from .repository import DayRecordRepository
from .state_machine import day_status, ensure_can_clock_in, ensure_can_clock_out, session_hours
from .time_fragments import to_fragment

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        records: DayRecordRepository,
        *,
        site: Site = DEFAULT_SITE,
        pending: PendingClockOutRegistry | None = None,
        strategy_factory: DurationStrategyFactory | None = None,
        geolocation_timeout_s: float = GEOLOCATION_TIMEOUT_SECONDS,
        locks: UserLocks | None = None,
    ):
        self._records = records
        self._site = site
        self._pending = pending or PendingClockOutRegistry()
        self._factory = strategy_factory or DurationStrategyFactory()
        self._geolocation_timeout_s = float(geolocation_timeout_s)
        self._locks = locks or UserLocks()

    def status(self, ctx: AttendanceContext, *, now: datetime | None = None) -> DayStatus:
        now = now or now_local()
        user_id = ctx.require_user_id()
        return day_status(self._records.get(user_id, now.date()))

    def clock_in(
        self,
        ctx: AttendanceContext,
        *,
        locator: GeolocationProvider,
        now: datetime | None = None,
    ) -> DayRecord:
        user_id = ctx.require_user_id()

        with self._locks.hold(user_id):
            now = now or now_local()
            today = now.date()

            ensure_can_clock_in(self._records.get(user_id, today))

            position = locator.get_current_position(
                high_accuracy=True, timeout_s=self._geolocation_timeout_s
            )
            distance = distance_meters(position, self._site.center)
            if distance > self._site.radius_meters:
                logger.info("Clock-in rejected user=%s distance=%.0fm", user_id, distance)
                raise OutOfRange(distance)

            record = self._records.upsert(
                user_id,
                today,
                {"time_in": to_fragment(now), "created_at": now, "updated_at": now},
            )
            logger.info("Clock-in user=%s date=%s time_in=%s", user_id, record.date_key, record.time_in)
            return record

    def request_clock_out(self, ctx: AttendanceContext, *, now: datetime | None = None) -> PendingClockOut:
        """First phase: check there is an open session and ask for confirmation."""
        now = now or now_local()
        user_id = ctx.require_user_id()

        record = self._records.get(user_id, now.date())
        ensure_can_clock_out(record)
        return self._pending.register(user_id=user_id, work_date=now.date(), time_in=record.time_in, now=now)

    def confirm_clock_out(self, ctx: AttendanceContext, token: str, *, now: datetime | None = None) -> DayRecord:
        """Second phase: re-check the session, then write time_out.

        Confirming the same token twice returns the first result.
        """
        user_id = ctx.require_user_id()
        pending = self._pending.get(token)
        if pending is None or pending.user_id != user_id:
            raise NoOpenSession("Clock-out request expired. Please try again.")
        if pending.result is not None:
            return pending.result

        with self._locks.hold(user_id):
            now = now or now_local()
            today = now.date()
            if pending.work_date != today:
                self._pending.forget(token)
                raise NoOpenSession("The day has changed since the time-out was requested.")

            # From here on a cancel can no longer abort the request.
            if not self._pending.mark_issued(token):
                raise NoOpenSession("Clock-out request was cancelled. Please try again.")

            try:
                record = self._records.get(user_id, today)
                ensure_can_clock_out(record)

                fields = {
                    # Re-sent so the row never carries time_out without time_in.
                    "time_in": record.time_in or pending.time_in,
                    "time_out": to_fragment(now),
                    "updated_at": now,
                }
                total_hours = session_hours(record.time_in_at, now)
                if total_hours is not None:
                    fields["total_hours"] = total_hours

                result = self._records.upsert(user_id, today, fields)
            except NoOpenSession:
                self._pending.forget(token)
                raise
            except StoreError:
                self._pending.mark_issued(token, issued=False)
                raise

            self._pending.complete(token, result)
            logger.info(
                "Clock-out user=%s date=%s time_out=%s total_hours=%s",
                user_id,
                result.date_key,
                result.time_out,
                result.total_hours,
            )
            return result

    def cancel_clock_out(self, ctx: AttendanceContext, token: str) -> bool:
        user_id = ctx.require_user_id()
        pending = self._pending.get(token)
        if pending is None or pending.user_id != user_id:
            return False
        return self._pending.discard(token)

    def get_history(
        self,
        ctx: AttendanceContext,
        *,
        limit: int = ATTENDANCE_HISTORY_LIMIT,
        now: datetime | None = None,
    ) -> list[dict]:
        now = now or now_local()
        user_id = ctx.require_user_id()
        rows = self._records.query(user_id, limit=limit)
        return [self._to_ui(r, now=now) for r in rows]

    def _to_ui(self, r: DayRecord, *, now: datetime) -> dict:
        strategy = self._factory.for_record(r, today=now.date())
        minutes = strategy.minutes(r, now=now)
        saved_at = r.updated_at or r.created_at or r.time_out_at or r.time_in_at
        return {
            "date": r.date_key,
            "status": day_status(r).value,
            "time_in": r.time_in,
            "time_out": r.time_out,
            "duration_minutes": round(minutes, 2) if minutes is not None else None,
            "note": r.work_notes or "",
            "saved_at": saved_at.isoformat() if saved_at else None,
        }
