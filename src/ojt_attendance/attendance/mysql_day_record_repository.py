from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import now_local
from ..core.exceptions import StoreReadFailed, StoreWriteFailed, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DAY_FIELDS, DayRecord
from .repository import DayRecordRepository
from .time_fragments import normalize_fragment

logger = logging.getLogger(__name__)

_COLUMNS = "user_id, work_date, time_in, time_out, total_hours, work_notes, created_at, updated_at"


def _to_record(r: dict) -> DayRecord:
    total = r.get("total_hours")
    return DayRecord(
        user_id=str(r["user_id"]),
        work_date=r["work_date"],
        time_in=normalize_fragment(r.get("time_in")),
        time_out=normalize_fragment(r.get("time_out")),
        total_hours=float(total) if total is not None else None,
        work_notes=r.get("work_notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLDayRecordRepository(DayRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str, work_date: date) -> Optional[DayRecord]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_logs
                    WHERE user_id=%s AND work_date=%s
                    """,
                    (user_id, work_date),
                )
                r = fetchone(cur)
                return _to_record(r) if r else None
        except mysql.connector.Error as e:
            logger.exception("Reading day-record failed user=%s date=%s", user_id, work_date)
            raise StoreReadFailed() from e

    def upsert(self, user_id: str, work_date: date, fields: Mapping[str, Any]) -> DayRecord:
        unknown = set(fields) - set(DAY_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown day-record fields: {', '.join(sorted(unknown))}")

        now = now_local()
        values = dict(fields)
        values["updated_at"] = values.get("updated_at") or now
        insert_values = dict(values)
        insert_values.setdefault("created_at", now)

        cols = list(insert_values)
        placeholders = ", ".join(["%s"] * (len(cols) + 2))
        # Row alias form; needs MySQL 8.0.19+.
        # Only the supplied columns are touched on conflict.
        updates = ", ".join(f"{c}=new.{c}" for c in values)

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO attendance_logs(user_id, work_date, {", ".join(cols)})
                    VALUES({placeholders}) AS new
                    ON DUPLICATE KEY UPDATE {updates}
                    """,
                    (user_id, work_date, *[insert_values[c] for c in cols]),
                )
                cur.execute(
                    f"SELECT {_COLUMNS} FROM attendance_logs WHERE user_id=%s AND work_date=%s",
                    (user_id, work_date),
                )
                return _to_record(fetchone(cur))
        except mysql.connector.Error as e:
            logger.exception("Upsert failed user=%s date=%s fields=%s", user_id, work_date, sorted(fields))
            raise StoreWriteFailed() from e

    def query(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int,
    ) -> Sequence[DayRecord]:
        clauses = ["user_id=%s"]
        params: list[object] = [user_id]
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)
        params.append(int(limit))

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_logs
                    WHERE {" AND ".join(clauses)}
                    ORDER BY work_date DESC
                    LIMIT %s
                    """,
                    tuple(params),
                )
                return [_to_record(r) for r in fetchall(cur)]
        except mysql.connector.Error as e:
            logger.exception("Querying day-records failed user=%s", user_id)
            raise StoreReadFailed() from e

    def list_for_date(self, work_date: date, user_ids: Sequence[str]) -> Sequence[DayRecord]:
        if not user_ids:
            return []
        placeholders = ", ".join(["%s"] * len(user_ids))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_logs
                    WHERE work_date=%s AND user_id IN ({placeholders})
                    """,
                    (work_date, *user_ids),
                )
                return [_to_record(r) for r in fetchall(cur)]
        except mysql.connector.Error as e:
            logger.exception("Roster query failed date=%s", work_date)
            raise StoreReadFailed() from e
