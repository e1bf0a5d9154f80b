from __future__ import annotations

from typing import Sequence

from ...core.constants import MOVING_AVERAGE_WINDOW
from ..reducer import BucketCounts
from .base import SeriesView


def moving_average(values: Sequence[float], window: int) -> list[float]:
    """Trailing mean: item ``i`` averages ``values[max(0, i - window + 1) : i + 1]``."""
    out: list[float] = []
    for i in range(len(values)):
        span = values[max(0, i - window + 1) : i + 1]
        out.append(round(sum(span) / len(span), 2))
    return out


class PatternView(SeriesView):
    """Attendance rate per bucket plus a trailing moving average."""

    name = "patternData"

    def __init__(self, max_window: int = MOVING_AVERAGE_WINDOW):
        self._max_window = max_window

    def row(self, counts: BucketCounts) -> dict:
        return {
            "attendanceRate": counts.attendance_rate,
            "presentCount": counts.present,
            "absentCount": counts.absent,
            "lateCount": counts.late,
            "excusedCount": counts.excused,
            "totalClasses": counts.total,
        }

    def finalize(self, rows: list[dict]) -> list[dict]:
        window = min(self._max_window, len(rows))
        averages = moving_average([r["attendanceRate"] for r in rows], window)
        for r, avg in zip(rows, averages):
            r["movingAverage"] = avg
        return rows
