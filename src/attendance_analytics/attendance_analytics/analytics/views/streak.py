from __future__ import annotations

from ..reducer import BucketCounts, percentage
from .base import SeriesView


class StreakView(SeriesView):
    """Good (present/late) vs poor (absent) tallies per bucket.

    These are per-bucket aggregate counts, not runs of consecutive statuses;
    downstream charts depend on this shape.
    """

    name = "streakData"

    def row(self, counts: BucketCounts) -> dict:
        return {
            "goodStreaks": counts.attended,
            "poorStreaks": counts.absent,
            "totalStudents": counts.total,
            "presentCount": counts.present,
            "absentCount": counts.absent,
            "lateCount": counts.late,
            "excusedCount": counts.excused,
        }

    def finalize(self, rows: list[dict]) -> dict:
        total_good = sum(r["goodStreaks"] for r in rows)
        total_poor = sum(r["poorStreaks"] for r in rows)
        total_events = sum(r["totalStudents"] for r in rows)

        stats = {
            "maxGoodStreak": max((r["goodStreaks"] for r in rows), default=0),
            "maxPoorStreak": max((r["poorStreaks"] for r in rows), default=0),
            "currentStreak": rows[-1]["goodStreaks"] if rows else 0,
            "currentStreakType": "good" if total_good > total_poor else "poor",
            "totalGoodDays": total_good,
            "totalStudents": total_events,
            "averageStreak": percentage(total_good, total_events),
            "longestStreak": max((max(r["goodStreaks"], r["poorStreaks"]) for r in rows), default=0),
            "presentStreaks": total_good,
            "absentStreaks": total_poor,
        }
        return {"data": rows, "stats": stats}
