from datetime import datetime, timezone

import pytest

from src.attendance_analytics.attendance_analytics.analytics.date_range import resolve_date_range
from src.attendance_analytics.attendance_analytics.attendance.model import AnalyticsFilters
from src.attendance_analytics.attendance_analytics.core.exceptions import ValidationError

END = (23, 59, 59, 999999)


def _resolve(now, **kwargs):
    return resolve_date_range(AnalyticsFilters(**kwargs), now=now)


def test_today_covers_whole_day():
    r = _resolve(datetime(2025, 1, 15, 12, 0), time_range="today")
    assert r.start == datetime(2025, 1, 15)
    assert r.end == datetime(2025, 1, 15, *END)


def test_week_starting_on_sunday_itself():
    r = _resolve(datetime(2025, 1, 12, 7, 0), time_range="week")
    assert r.start == datetime(2025, 1, 12)
    assert r.end == datetime(2025, 1, 18, *END)


def test_month_in_leap_february():
    r = _resolve(datetime(2024, 2, 10), time_range="month")
    assert r.start == datetime(2024, 2, 1)
    assert r.end == datetime(2024, 2, 29, *END)
    assert len(r.days()) == 29


def test_quarter_boundaries():
    r = _resolve(datetime(2025, 11, 3), time_range="quarter")
    assert r.start == datetime(2025, 10, 1)
    assert r.end == datetime(2025, 12, 31, *END)


@pytest.mark.parametrize("time_range", ["year", "bogus"])
def test_year_and_unknown_cover_calendar_year(time_range):
    r = _resolve(datetime(2025, 6, 1), time_range=time_range)
    assert r.start == datetime(2025, 1, 1)
    assert r.end == datetime(2025, 12, 31, *END)


def test_custom_without_dates_uses_configured_window():
    r = resolve_date_range(
        AnalyticsFilters(time_range="custom"),
        now=datetime(2030, 1, 1),
        custom_range=("2025-01-15", "2025-04-15"),
    )
    assert r.start == datetime(2025, 1, 15)
    assert r.end == datetime(2025, 4, 15, *END)


def _local(aware: datetime) -> datetime:
    return aware.astimezone().replace(tzinfo=None)


def test_explicit_dates_accept_utc_suffix():
    r = _resolve(datetime(2025, 1, 1), start_date="2025-03-01T00:00:00Z", end_date="2025-03-02")
    assert r.start == _local(datetime(2025, 3, 1, tzinfo=timezone.utc))
    assert r.end == datetime(2025, 3, 2, *END)


def test_explicit_start_with_offset_is_converted_not_truncated():
    r = _resolve(datetime(2025, 1, 1), start_date="2025-01-15T20:00:00-05:00", end_date="2025-01-17")

    assert r.start == _local(datetime(2025, 1, 16, 1, 0, tzinfo=timezone.utc))
    assert r.start.tzinfo is None


def test_only_one_explicit_date_falls_back_to_named_range():
    r = _resolve(datetime(2025, 1, 15), time_range="today", start_date="2025-03-01")
    assert r.start == datetime(2025, 1, 15)


def test_invalid_date_is_rejected():
    with pytest.raises(ValidationError):
        _resolve(datetime(2025, 1, 1), start_date="2025-13-40", end_date="2025-03-02")


def test_start_after_end_is_rejected():
    with pytest.raises(ValidationError):
        _resolve(datetime(2025, 1, 1), start_date="2025-03-05", end_date="2025-03-02")
