from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RosterStatus


@dataclass(frozen=True)
class Trainee:
    user_id: str
    name: Optional[str] = None
    required_hours: Optional[float] = None


@dataclass(frozen=True)
class RosterRow:
    user_id: str
    name: str
    status: RosterStatus
    time_in: Optional[str]
    time_out: Optional[str]
    total_hours: Optional[float]
    work_notes: Optional[str]


@dataclass(frozen=True)
class RosterSummary:
    total_trainees: int
    timed_in: int
    missing_time_out: int
    avg_hours: float


@dataclass(frozen=True)
class Roster:
    rows: list[RosterRow]
    summary: RosterSummary
