from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..model import DayRecord
from .base import DurationStrategy


class StoredTotalStrategy(DurationStrategy):
    """Use the precomputed total_hours column."""

    def minutes(self, record: DayRecord, *, now: datetime) -> Optional[float]:
        return max(0.0, float(record.total_hours) * 60)
