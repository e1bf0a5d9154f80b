from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import AnalyticsFilters, AttendanceEvent
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import end_of_day, now_local, parse_iso_date, start_of_day
from ..core.constants import DEFAULT_ABSENTEE_LIMIT, DEFAULT_CUSTOM_RANGE, DEFAULT_MAX_RECORDS
from ..core.enums import TimeRange
from ..core.exceptions import ValidationError
from .breakdowns import department_stats, rank_absentees, risk_levels, summarize
from .cache import AnalyticsCache
from .date_range import DateRange, resolve_date_range
from .views.base import SeriesContext, SeriesView
from .views.late_arrival import LateArrivalView
from .views.pattern import PatternView
from .views.streak import StreakView
from .views.time_series import TimeSeriesView

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Fetches attendance events once per request and derives every chart view.

    Each view runs its own pass over the same event batch; the bundle is cached
    per filter signature.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        cache: Optional[AnalyticsCache] = None,
        *,
        clock: Callable[[], datetime] = now_local,
        max_records: int = DEFAULT_MAX_RECORDS,
        custom_range: tuple[str, str] = DEFAULT_CUSTOM_RANGE,
        views: Optional[Sequence[SeriesView]] = None,
    ):
        self._attendance = attendance
        self._cache = cache if cache is not None else AnalyticsCache()
        self._clock = clock
        self._max_records = int(max_records)
        self._custom_range = custom_range
        self._views = tuple(views) if views is not None else (
            TimeSeriesView(),
            LateArrivalView(),
            PatternView(),
            StreakView(),
        )

    def resolve_range(self, filters: AnalyticsFilters) -> DateRange:
        return resolve_date_range(filters, now=self._clock(), custom_range=self._custom_range)

    def get_analytics(self, filters: AnalyticsFilters, *, no_cache: bool = False) -> dict:
        key = filters.cache_key()
        if not no_cache:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Analytics cache hit for %s", key)
                return cached

        date_range = self.resolve_range(filters)
        logger.info("Analytics requested: %s range=%s..%s", filters.as_log_dict(), date_range.start, date_range.end)

        events = self._fetch(filters, date_range)
        total_students = self._attendance.count_students(filters=filters)

        result = {"success": True, "data": self.compute(events, filters, date_range, total_students=total_students)}

        if not no_cache:
            try:
                self._cache.set(key, result)
            except Exception:
                logger.warning("Could not cache analytics result for %s", key, exc_info=True)
        return result

    def compute(
        self,
        events: Sequence[AttendanceEvent],
        filters: AnalyticsFilters,
        date_range: DateRange,
        *,
        total_students: int,
    ) -> dict:
        time_range = TimeRange.parse(filters.time_range) or TimeRange.CUSTOM
        ctx = SeriesContext.build(time_range, date_range)

        data: dict = {view.name: view.build(events, ctx) for view in self._views}
        data["departmentStats"] = department_stats(events)
        data["riskLevelData"] = risk_levels(events)
        data["summary"] = summarize(events, total_students=total_students)

        logger.debug(
            "Analytics computed from %d events: %s",
            len(events),
            {name: len(value) for name, value in data.items() if isinstance(value, list)},
        )
        return data

    def top_absentees(
        self,
        filters: AnalyticsFilters,
        *,
        start: str,
        end: str,
        q: str = "",
        limit: int = DEFAULT_ABSENTEE_LIMIT,
    ) -> dict:
        if not start or not end:
            raise ValidationError("start and end are required (YYYY-MM-DD)")
        try:
            start_d = parse_iso_date(start)
            end_d = parse_iso_date(end)
        except ValueError as e:
            raise ValidationError("start and end must be YYYY-MM-DD") from e
        if start_d > end_d:
            raise ValidationError("start must not be after end")

        events = self._fetch(filters, DateRange(start=start_of_day(start_d), end=end_of_day(end_d)))
        ranking = rank_absentees(events, q=q, limit=limit)
        ranking["meta"].update({"start": start, "end": end})
        return ranking

    def _fetch(self, filters: AnalyticsFilters, date_range: DateRange) -> Sequence[AttendanceEvent]:
        events = self._attendance.find_events(
            filters=filters,
            start=date_range.start,
            end=date_range.end,
            limit=self._max_records,
        )
        logger.info("Found %d attendance records", len(events))
        if len(events) >= self._max_records:
            logger.warning("Attendance records capped at %d; aggregates cover the newest only", self._max_records)
        return events
