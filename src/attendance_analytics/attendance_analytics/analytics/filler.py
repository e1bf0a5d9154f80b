from __future__ import annotations

from typing import Iterable, Mapping

from ..core.enums import TimeRange
from .buckets import BucketKeyFn
from .date_range import DateRange
from .reducer import BucketCounts


def bucket_universe(time_range: TimeRange, date_range: DateRange) -> Iterable[str]:
    """Every bucket key the range can hold, for ranges that are dense-filled."""
    if time_range is TimeRange.TODAY:
        return [str(hour) for hour in range(24)]
    if time_range in (TimeRange.WEEK, TimeRange.MONTH):
        return [d.isoformat() for d in date_range.days()]
    if time_range is TimeRange.YEAR:
        return [str(month) for month in range(1, 13)]
    return []


def fill_dense(
    buckets: Mapping[str, BucketCounts],
    *,
    time_range: TimeRange,
    key_fn: BucketKeyFn,
    date_range: DateRange,
) -> list[tuple[str, BucketCounts]]:
    """Insert zero-valued buckets for gaps and sort by natural key order.

    Quarter and custom ranges are not back-filled: only buckets that occurred
    are returned.
    """
    keys = set(buckets)
    if time_range.dense:
        keys.update(bucket_universe(time_range, date_range))
    return [(key, buckets.get(key) or BucketCounts()) for key in sorted(keys, key=key_fn.sort_key)]
