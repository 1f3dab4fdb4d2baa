from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .model import DayRecord
from .strategies.base import DurationStrategy
from .strategies.fragment_strategy import FragmentStrategy
from .strategies.open_session_strategy import OpenSessionStrategy
from .strategies.stored_total_strategy import StoredTotalStrategy
from .strategies.unknown_strategy import UnknownStrategy


@dataclass
class DurationStrategyFactory:
    """Factory Pattern: pick how a record's duration is derived.

    Priority: stored total_hours, then time fragments, then (today only) the
    open session up to now, else unknown.
    """

    prefer_stored: bool = True

    def for_record(self, record: DayRecord, *, today: date) -> DurationStrategy:
        if self.prefer_stored and record.total_hours is not None:
            return StoredTotalStrategy()

        start, end = record.time_in_at, record.time_out_at
        if start is not None and end is not None:
            return FragmentStrategy()
        if start is not None and end is None and record.work_date == today:
            return OpenSessionStrategy()
        return UnknownStrategy()
