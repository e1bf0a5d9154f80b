from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Optional

from .analytics.cache import AnalyticsCache
from .analytics.service import AnalyticsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .core.constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_CUSTOM_RANGE,
    DEFAULT_MAX_RECORDS,
)
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository
    analytics_cache: AnalyticsCache

    analytics_service: AnalyticsService


def build_services(
    attendance_repo: AttendanceRepository,
    *,
    settings: Optional[ModuleType] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire cache and service around an existing repository."""

    cache = AnalyticsCache(
        ttl_seconds=getattr(settings, "ANALYTICS_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
        max_entries=getattr(settings, "ANALYTICS_CACHE_MAX_ENTRIES", DEFAULT_CACHE_MAX_ENTRIES),
    )
    analytics_service = AnalyticsService(
        attendance_repo,
        cache,
        max_records=getattr(settings, "ANALYTICS_MAX_RECORDS", DEFAULT_MAX_RECORDS),
        custom_range=(
            getattr(settings, "CUSTOM_RANGE_START", DEFAULT_CUSTOM_RANGE[0]),
            getattr(settings, "CUSTOM_RANGE_END", DEFAULT_CUSTOM_RANGE[1]),
        ),
    )

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        analytics_cache=cache,
        analytics_service=analytics_service,
    )


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(MySQLAttendanceRepository(conn), settings=settings, conn=conn)
