from __future__ import annotations

from ..reducer import BucketCounts
from .base import SeriesView


class LateArrivalView(SeriesView):
    """Share of late events (late / total) per bucket."""

    name = "lateArrivalData"

    def row(self, counts: BucketCounts) -> dict:
        return {
            "lateRate": counts.late_rate,
            "lateCount": counts.late,
            "totalCount": counts.total,
        }
