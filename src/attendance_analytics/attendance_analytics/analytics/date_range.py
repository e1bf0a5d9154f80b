from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..attendance.model import AnalyticsFilters
from ..common.datetime_utils import end_of_day, parse_iso_datetime, start_of_day
from ..core.constants import DEFAULT_CUSTOM_RANGE
from ..core.enums import TimeRange
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def days(self) -> list[date]:
        """Every calendar day from start to end inclusive."""
        out: list[date] = []
        current = self.start.date()
        while current <= self.end.date():
            out.append(current)
            current += timedelta(days=1)
        return out


def _last_day_of_month(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def resolve_date_range(
    filters: AnalyticsFilters,
    *,
    now: datetime,
    custom_range: tuple[str, str] = DEFAULT_CUSTOM_RANGE,
) -> DateRange:
    """Resolve the effective window for a request.

    Explicit ``start_date``/``end_date`` (both present) win over the named
    range; the end is stretched to the end of its day.
    """
    if filters.start_date and filters.end_date:
        start = parse_iso_datetime(filters.start_date, field_name="startDate")
        end = end_of_day(parse_iso_datetime(filters.end_date, field_name="endDate").date())
        if start > end:
            raise ValidationError("startDate must not be after endDate")
        return DateRange(start=start, end=end)

    today = now.date()
    time_range = TimeRange.parse(filters.time_range)

    if time_range is TimeRange.TODAY:
        return DateRange(start=start_of_day(today), end=end_of_day(today))

    if time_range is TimeRange.WEEK:
        # Weeks start on Sunday.
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return DateRange(start=start_of_day(week_start), end=end_of_day(week_start + timedelta(days=6)))

    if time_range is TimeRange.MONTH:
        return DateRange(
            start=start_of_day(today.replace(day=1)),
            end=end_of_day(_last_day_of_month(today.year, today.month)),
        )

    if time_range is TimeRange.QUARTER:
        first_month = (today.month - 1) // 3 * 3 + 1
        return DateRange(
            start=start_of_day(date(today.year, first_month, 1)),
            end=end_of_day(_last_day_of_month(today.year, first_month + 2)),
        )

    if time_range is TimeRange.CUSTOM:
        start_s, end_s = custom_range
        return DateRange(
            start=start_of_day(parse_iso_datetime(start_s, field_name="CUSTOM_RANGE_START").date()),
            end=end_of_day(parse_iso_datetime(end_s, field_name="CUSTOM_RANGE_END").date()),
        )

    # "year" and anything unrecognized cover the current calendar year.
    return DateRange(start=start_of_day(date(today.year, 1, 1)), end=end_of_day(date(today.year, 12, 31)))
