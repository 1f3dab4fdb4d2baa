from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..model import DayRecord
from .base import DurationStrategy


class UnknownStrategy(DurationStrategy):
    """Nothing to derive from; unknown is not the same as zero."""

    def minutes(self, record: DayRecord, *, now: datetime) -> Optional[float]:
        return None
