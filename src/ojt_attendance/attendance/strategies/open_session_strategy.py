from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import minutes_between
from ..model import DayRecord
from .base import DurationStrategy


class OpenSessionStrategy(DurationStrategy):
    """Today's unterminated session, elapsed up to now."""

    def minutes(self, record: DayRecord, *, now: datetime) -> Optional[float]:
        start = record.time_in_at
        if start is None:
            return None
        return max(0.0, minutes_between(start, now))
