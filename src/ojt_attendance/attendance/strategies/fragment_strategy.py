from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import minutes_between
from ..model import DayRecord
from .base import DurationStrategy


class FragmentStrategy(DurationStrategy):
    """Closed session: time_out - time_in, not below 0."""

    def minutes(self, record: DayRecord, *, now: datetime) -> Optional[float]:
        start, end = record.time_in_at, record.time_out_at
        if start is None or end is None:
            return None
        return max(0.0, minutes_between(start, end))
