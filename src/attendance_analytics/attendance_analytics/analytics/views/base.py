from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence

from ...attendance.model import AttendanceEvent
from ...core.enums import TimeRange
from ..buckets import BucketKeyFn
from ..date_range import DateRange
from ..filler import fill_dense
from ..reducer import BucketCounts, BucketedReducer


@dataclass(frozen=True)
class SeriesContext:
    """Per-request bucketing shared by every time-bucketed view."""

    time_range: TimeRange
    date_range: DateRange
    key_fn: BucketKeyFn

    @classmethod
    def build(cls, time_range: TimeRange, date_range: DateRange) -> "SeriesContext":
        return cls(
            time_range=time_range,
            date_range=date_range,
            key_fn=BucketKeyFn(granularity=time_range.granularity, range_start=date_range.start),
        )

    def dense_series(self, events: Sequence[AttendanceEvent]) -> list[tuple[str, BucketCounts]]:
        key_fn = self.key_fn
        buckets = BucketedReducer(lambda e: key_fn(e.timestamp)).reduce(events)
        return fill_dense(buckets, time_range=self.time_range, key_fn=key_fn, date_range=self.date_range)

    def labels(self, key: str) -> dict[str, str]:
        return {field: key for field in self.time_range.label_fields}


class SeriesView(ABC):
    """Strategy Pattern: one chart series projected from bucketed counters."""

    name: str = "series"

    def build(self, events: Sequence[AttendanceEvent], ctx: SeriesContext) -> Any:
        rows = [{**self.row(counts), **ctx.labels(key)} for key, counts in ctx.dense_series(events)]
        return self.finalize(rows)

    @abstractmethod
    def row(self, counts: BucketCounts) -> dict:
        raise NotImplementedError

    def finalize(self, rows: list[dict]) -> Any:
        return rows
