from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import AnalyticsFilters, AttendanceEvent


class AttendanceRepository(Protocol):
    def find_events(
        self,
        *,
        filters: AnalyticsFilters,
        start: datetime,
        end: datetime,
        limit: int,
    ) -> Sequence[AttendanceEvent]:
        """Events inside ``[start, end]`` matching the filters, newest first."""

        raise NotImplementedError

    def count_students(self, *, filters: AnalyticsFilters) -> int:
        """Enrolled students matching the non-date filters."""

        raise NotImplementedError
