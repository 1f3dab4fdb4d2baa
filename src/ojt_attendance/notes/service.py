from __future__ import annotations

import logging
import re
from datetime import datetime

from ..attendance.context import AttendanceContext
from ..attendance.locks import UserLocks
from ..attendance.model import DayRecord
from ..attendance.repository import DayRecordRepository
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import normalize_note, require_not_future
from ..core.exceptions import NoteAlreadySaved

logger = logging.getLogger(__name__)

_NUMBERED = re.compile(r"(?<!\d)\s*(?=\d+\.\s)")
_BULLETED = re.compile(r"\s*(?=[-*•]\s)")


def format_note_text(note: str | None) -> str:
    """Put numbered and bulleted items on their own lines for display."""
    if not note:
        return ""
    with_breaks = _BULLETED.sub("\n", _NUMBERED.sub("\n", note))
    return "\n".join(line.strip() for line in with_breaks.split("\n") if line.strip())


class NoteService:
    """Work notes live beside the clock fields and never modify them."""

    def __init__(self, records: DayRecordRepository, *, locks: UserLocks | None = None):
        self._records = records
        self._locks = locks or UserLocks()

    def save_today_note(self, ctx: AttendanceContext, text: str, *, now: datetime | None = None) -> DayRecord:
        now = now or now_local()
        user_id = ctx.require_user_id()

        with self._locks.hold(user_id):
            existing = self._records.get(user_id, now.date())
            if existing is not None and existing.has_note:
                raise NoteAlreadySaved()

            return self._write(user_id, now.date(), text, now=now)

    def edit_note(self, ctx: AttendanceContext, date_key: str, text: str, *, now: datetime | None = None) -> DayRecord:
        now = now or now_local()
        user_id = ctx.require_user_id()
        work_date = require_not_future(parse_iso_date(date_key), now.date(), "Note date")
        with self._locks.hold(user_id):
            return self._write(user_id, work_date, text, now=now)

    def _write(self, user_id: str, work_date, text: str, *, now: datetime) -> DayRecord:
        record = self._records.upsert(
            user_id,
            work_date,
            {"work_notes": normalize_note(text), "updated_at": now},
        )
        logger.info("Note saved user=%s date=%s", user_id, record.date_key)
        return record
