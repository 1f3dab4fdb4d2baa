from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from .model import DayRecord, merge_day_fields
from .repository import DayRecordRepository


class InMemoryDayRecordRepository(DayRecordRepository):
    """Process-local store used by the testing settings and the test-suite."""

    def __init__(self, *, clock: Callable[[], datetime] = now_local):
        self._rows: dict[tuple[str, date], DayRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.write_count = 0

    def get(self, user_id: str, work_date: date) -> Optional[DayRecord]:
        return self._rows.get((user_id, work_date))

    def upsert(self, user_id: str, work_date: date, fields: Mapping[str, Any]) -> DayRecord:
        with self._lock:
            merged = merge_day_fields(
                self._rows.get((user_id, work_date)),
                user_id=user_id,
                work_date=work_date,
                fields=fields,
                now=self._clock(),
            )
            self._rows[(user_id, work_date)] = merged
            self.write_count += 1
            return merged

    def query(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int,
    ) -> Sequence[DayRecord]:
        items = [
            r
            for (uid, d), r in self._rows.items()
            if uid == user_id and (start is None or d >= start) and (end is None or d <= end)
        ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[: int(limit)]

    def list_for_date(self, work_date: date, user_ids: Sequence[str]) -> Sequence[DayRecord]:
        wanted = set(user_ids)
        return [r for (uid, d), r in self._rows.items() if d == work_date and uid in wanted]
