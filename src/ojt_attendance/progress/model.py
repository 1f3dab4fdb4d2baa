from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import DayStatus


@dataclass(frozen=True)
class WeeklySummary:
    total_minutes: float
    days_attended: int
    avg_hours_per_day: float


@dataclass(frozen=True)
class ProgressView:
    completed_minutes: int
    remaining_minutes: int
    percent: int
    target_hours: float

    @property
    def completed_label(self) -> str:
        return f"{self.completed_minutes // 60}h {self.completed_minutes % 60}m"

    @property
    def remaining_label(self) -> str:
        return f"{self.remaining_minutes // 60}h {self.remaining_minutes % 60}m"


@dataclass(frozen=True)
class TodayStatusView:
    """Read-model for the "today's attendance" card."""

    status: DayStatus
    time_in: Optional[str] = None
    time_out: Optional[str] = None
    elapsed_minutes: Optional[int] = None
    total_hours: Optional[float] = None
