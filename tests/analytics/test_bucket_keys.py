from datetime import date, datetime

from src.attendance_analytics.attendance_analytics.analytics.buckets import BucketKeyFn, bucket_key, bucket_sort_key
from src.attendance_analytics.attendance_analytics.core.enums import Granularity, TimeRange

RANGE_START = datetime(2025, 1, 1)


def test_hour_key_is_hour_of_day():
    assert bucket_key(datetime(2025, 1, 15, 9, 59), Granularity.HOUR, RANGE_START) == "9"
    assert bucket_key(datetime(2025, 1, 15, 0, 0), Granularity.HOUR, RANGE_START) == "0"


def test_day_key_is_iso_date():
    assert bucket_key(datetime(2025, 1, 15, 23, 59), Granularity.DAY, RANGE_START) == "2025-01-15"


def test_month_key_is_month_number():
    assert bucket_key(datetime(2025, 11, 3), Granularity.MONTH, RANGE_START) == "11"


def test_week_key_counts_from_range_start():
    assert bucket_key(datetime(2025, 1, 1, 0, 0, 0), Granularity.WEEK, RANGE_START) == "Week 0"
    assert bucket_key(datetime(2025, 1, 1, 0, 0, 1), Granularity.WEEK, RANGE_START) == "Week 1"
    assert bucket_key(datetime(2025, 1, 8, 0, 0, 0), Granularity.WEEK, RANGE_START) == "Week 1"
    assert bucket_key(datetime(2025, 1, 8, 0, 0, 1), Granularity.WEEK, RANGE_START) == "Week 2"


def test_week_key_shifts_with_range_start():
    ts = datetime(2025, 1, 20, 10)
    assert bucket_key(ts, Granularity.WEEK, datetime(2025, 1, 1)) == "Week 3"
    assert bucket_key(ts, Granularity.WEEK, datetime(2025, 1, 15)) == "Week 1"


def test_sort_keys_follow_natural_order():
    hours = sorted(["10", "2", "0"], key=lambda k: bucket_sort_key(k, Granularity.HOUR))
    assert hours == ["0", "2", "10"]

    weeks = sorted(["Week 10", "Week 2", "Week 1"], key=lambda k: bucket_sort_key(k, Granularity.WEEK))
    assert weeks == ["Week 1", "Week 2", "Week 10"]

    assert bucket_sort_key("2025-01-15", Granularity.DAY) == date(2025, 1, 15)


def test_bound_key_fn_uses_range_granularity():
    key_fn = BucketKeyFn(granularity=TimeRange.YEAR.granularity, range_start=RANGE_START)
    assert key_fn(datetime(2025, 6, 30, 12)) == "6"
    assert key_fn.sort_key("12") == 12


def test_custom_and_unknown_ranges_group_by_day():
    assert TimeRange.CUSTOM.granularity is Granularity.DAY
    assert TimeRange.parse("decade") is None
    assert TimeRange.parse(" Quarter ") is TimeRange.QUARTER
