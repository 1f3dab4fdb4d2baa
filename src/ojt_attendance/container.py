from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import DurationStrategyFactory
from .attendance.geofence import Coordinate, Site
from .attendance.geolocation import GeolocationProvider, ReportedPositionProvider, TimeoutPositionProvider
from .attendance.locks import UserLocks
from .attendance.memory_day_record_repository import InMemoryDayRecordRepository
from .attendance.mysql_day_record_repository import MySQLDayRecordRepository
from .attendance.pending import PendingClockOutRegistry
from .attendance.repository import DayRecordRepository
from .attendance.service import AttendanceService
from .core import constants
from .database.connection import DatabaseConnection
from .notes.service import NoteService
from .progress.service import ProgressService
from .team.service import TeamService


@dataclass(frozen=True)
class Container:
    records_repo: DayRecordRepository

    attendance_service: AttendanceService
    progress_service: ProgressService
    note_service: NoteService
    team_service: TeamService

    geolocation_timeout_s: float = constants.GEOLOCATION_TIMEOUT_SECONDS

    def locator_for(self, position: Optional[Coordinate]) -> GeolocationProvider:
        return TimeoutPositionProvider(ReportedPositionProvider(position), timeout_s=self.geolocation_timeout_s)


def _build_records_repo(store_backend: str, db_config: Optional[dict]) -> DayRecordRepository:
    if store_backend == "memory":
        return InMemoryDayRecordRepository()
    if store_backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql store backend")
        return MySQLDayRecordRepository(DatabaseConnection.from_settings(db_config))
    raise ValueError(f"Unknown store backend: {store_backend!r}")


def build_container(
    *,
    db_config: Optional[dict] = None,
    store_backend: str = "mysql",
    site_lat: float = constants.SITE_LAT,
    site_lng: float = constants.SITE_LNG,
    site_radius_meters: float = constants.SITE_RADIUS_METERS,
    target_hours: float = constants.DEFAULT_TARGET_HOURS,
    geolocation_timeout_s: float = constants.GEOLOCATION_TIMEOUT_SECONDS,
    records_repo: Optional[DayRecordRepository] = None,
) -> Container:
    records_repo = records_repo or _build_records_repo(store_backend, db_config)
    factory = DurationStrategyFactory()
    site = Site(center=Coordinate(float(site_lat), float(site_lng)), radius_meters=float(site_radius_meters))

    locks = UserLocks()
    attendance_service = AttendanceService(
        records_repo,
        site=site,
        pending=PendingClockOutRegistry(),
        strategy_factory=factory,
        geolocation_timeout_s=geolocation_timeout_s,
        locks=locks,
    )
    progress_service = ProgressService(records_repo, strategy_factory=factory, target_hours=target_hours)
    note_service = NoteService(records_repo, locks=locks)
    team_service = TeamService(records_repo, progress_service)

    return Container(
        records_repo=records_repo,
        attendance_service=attendance_service,
        progress_service=progress_service,
        note_service=note_service,
        team_service=team_service,
        geolocation_timeout_s=float(geolocation_timeout_s),
    )
