from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..model import DayRecord


class DurationStrategy(ABC):
    """Strategy Pattern: encapsulate how a day's worked minutes are derived."""

    @abstractmethod
    def minutes(self, record: DayRecord, *, now: datetime) -> Optional[float]:
        raise NotImplementedError
