from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

from .model import DayRecord, PendingClockOut


class PendingClockOutRegistry:
    """In-process holder for clock-out requests awaiting confirmation.

    Confirmed entries are kept (with their result) until they age out so a
    repeated confirm is answered without a second write.
    """

    def __init__(self, *, max_age: timedelta = timedelta(days=1)):
        self._items: dict[str, PendingClockOut] = {}
        self._lock = threading.Lock()
        self._max_age = max_age

    def register(self, *, user_id: str, work_date: date, time_in: Optional[str], now: datetime) -> PendingClockOut:
        pending = PendingClockOut(
            token=uuid.uuid4().hex,
            user_id=user_id,
            work_date=work_date,
            time_in=time_in,
            requested_at=now,
        )
        with self._lock:
            self._purge(now)
            self._items[pending.token] = pending
        return pending

    def get(self, token: str) -> Optional[PendingClockOut]:
        return self._items.get(token)

    def mark_issued(self, token: str, issued: bool = True) -> bool:
        """Flip the issued flag; False when the request is gone (cancelled or expired)."""
        with self._lock:
            item = self._items.get(token)
            if item is None:
                return False
            self._items[token] = replace(item, issued=issued)
            return True

    def complete(self, token: str, record: DayRecord) -> None:
        with self._lock:
            item = self._items.get(token)
            if item:
                self._items[token] = replace(item, issued=True, result=record)

    def discard(self, token: str) -> bool:
        """Drop a request unless its mutation was already issued."""
        with self._lock:
            item = self._items.get(token)
            if item is None or item.issued:
                return False
            del self._items[token]
            return True

    def forget(self, token: str) -> None:
        with self._lock:
            self._items.pop(token, None)

    def _purge(self, now: datetime) -> None:
        stale = [t for t, p in self._items.items() if now - p.requested_at > self._max_age]
        for t in stale:
            del self._items[t]
