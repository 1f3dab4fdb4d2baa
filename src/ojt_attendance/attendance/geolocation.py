from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.constants import GEOLOCATION_TIMEOUT_SECONDS
from ..core.exceptions import DomainError, LocationUnavailable
from .geofence import Coordinate

logger = logging.getLogger(__name__)


class GeolocationProvider(Protocol):
    def get_current_position(self, *, high_accuracy: bool, timeout_s: float) -> Coordinate:
        """Return the caller's coordinate or raise LocationUnavailable."""

        raise NotImplementedError


@dataclass(frozen=True)
class ReportedPositionProvider:
    """Coordinate reported by the client device along with the request."""

    position: Optional[Coordinate]

    def get_current_position(self, *, high_accuracy: bool, timeout_s: float) -> Coordinate:
        if self.position is None:
            raise LocationUnavailable()
        return self.position


class TimeoutPositionProvider:
    """Run a blocking provider on a worker thread with a hard deadline.

    A missing reading is never treated as an approval.
    """

    _executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="geolocation")

    def __init__(self, inner: GeolocationProvider, *, timeout_s: float = GEOLOCATION_TIMEOUT_SECONDS):
        self._inner = inner
        self._timeout_s = float(timeout_s)

    def get_current_position(self, *, high_accuracy: bool, timeout_s: float) -> Coordinate:
        deadline = min(self._timeout_s, float(timeout_s))
        future = self._executor.submit(
            self._inner.get_current_position, high_accuracy=high_accuracy, timeout_s=deadline
        )
        try:
            return future.result(timeout=deadline)
        except FutureTimeout:
            future.cancel()
            logger.warning("Geolocation timed out after %.1fs", deadline)
            raise LocationUnavailable() from None
        except DomainError:
            raise
        except Exception as e:
            logger.warning("Geolocation failed: %s", e)
            raise LocationUnavailable() from e
