from __future__ import annotations

from ..reducer import BucketCounts
from .base import SeriesView


class TimeSeriesView(SeriesView):
    """Attendance rate and per-status counts per bucket."""

    name = "timeBasedData"

    def row(self, counts: BucketCounts) -> dict:
        return {
            "attendanceRate": counts.attendance_rate,
            "presentCount": counts.present,
            "lateCount": counts.late,
            "absentCount": counts.absent,
            "excusedCount": counts.excused,
            "totalCount": counts.total,
        }
