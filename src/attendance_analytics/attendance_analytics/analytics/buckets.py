"""Bucket-key derivation shared by every time-bucketed view.

Every view receives the same :class:`BucketKeyFn` for a request, so the
time series, late-arrival, pattern and streak views always report the same
bucket set.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

from ..core.enums import Granularity

WEEK = timedelta(days=7)
_WEEK_PREFIX = "Week "

SortKey = Union[int, date, str]


def bucket_key(timestamp: datetime, granularity: Granularity, range_start: datetime) -> str:
    """Map a timestamp to its bucket key for the given granularity.

    Weekly buckets are numbered from ``range_start``: ``Week N`` with
    ``N = ceil((timestamp - range_start) / 7 days)``, so "Week 1" is the first
    7-day span of the selected window, not ISO week 1.
    """
    if granularity is Granularity.HOUR:
        return str(timestamp.hour)
    if granularity is Granularity.WEEK:
        return f"{_WEEK_PREFIX}{math.ceil((timestamp - range_start) / WEEK)}"
    if granularity is Granularity.MONTH:
        return str(timestamp.month)
    return timestamp.date().isoformat()


def bucket_sort_key(key: str, granularity: Granularity) -> SortKey:
    """Natural ordering of bucket keys (numeric hour/month/week, chronological date)."""
    if granularity in (Granularity.HOUR, Granularity.MONTH):
        return int(key)
    if granularity is Granularity.WEEK:
        return int(key[len(_WEEK_PREFIX):]) if key.startswith(_WEEK_PREFIX) else int(key)
    try:
        return date.fromisoformat(key)
    except ValueError:
        return key


@dataclass(frozen=True)
class BucketKeyFn:
    """Bucket-key derivation bound to one request's granularity and range start."""

    granularity: Granularity
    range_start: datetime

    def __call__(self, timestamp: datetime) -> str:
        return bucket_key(timestamp, self.granularity, self.range_start)

    def sort_key(self, key: str) -> SortKey:
        return bucket_sort_key(key, self.granularity)
