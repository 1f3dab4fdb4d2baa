from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import DayRecord


class DayRecordRepository(Protocol):
    """Persistence collaborator for day-records.

    ``upsert`` is keyed on (user_id, work_date) and merges field by field;
    callers never overwrite a whole row.
    """

    def get(self, user_id: str, work_date: date) -> Optional[DayRecord]:
        raise NotImplementedError

    def upsert(self, user_id: str, work_date: date, fields: Mapping[str, Any]) -> DayRecord:
        raise NotImplementedError

    def query(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int,
    ) -> Sequence[DayRecord]:
        """Rows for a user, newest date first, at most ``limit`` of them."""

        raise NotImplementedError

    def list_for_date(self, work_date: date, user_ids: Sequence[str]) -> Sequence[DayRecord]:
        raise NotImplementedError
