from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status recorded for one attendance event (exactly one per event)."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"

    @property
    def attended(self) -> bool:
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class Granularity(str, Enum):
    """Bucket width used to group events on the time axis."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class TimeRange(str, Enum):
    """Named windows accepted by the analytics endpoint."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: str | None) -> "TimeRange | None":
        """Return the matching member, or None for unknown values."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None

    @property
    def granularity(self) -> Granularity:
        return {
            TimeRange.TODAY: Granularity.HOUR,
            TimeRange.WEEK: Granularity.DAY,
            TimeRange.MONTH: Granularity.DAY,
            TimeRange.QUARTER: Granularity.WEEK,
            TimeRange.YEAR: Granularity.MONTH,
        }.get(self, Granularity.DAY)

    @property
    def dense(self) -> bool:
        """Whether empty buckets are synthesized across the whole range."""
        return self in (TimeRange.TODAY, TimeRange.WEEK, TimeRange.MONTH, TimeRange.YEAR)

    @property
    def label_fields(self) -> tuple[str, ...]:
        """JSON field(s) carrying the bucket key in chart rows."""
        return {
            TimeRange.TODAY: ("hour",),
            TimeRange.WEEK: ("date", "week"),
            TimeRange.MONTH: ("date",),
            TimeRange.QUARTER: ("week",),
            TimeRange.YEAR: ("month",),
        }.get(self, ("date",))


class RiskTier(str, Enum):
    """Risk category derived from a student's attendance rate."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def for_rate(cls, rate: float) -> "RiskTier":
        if rate >= 90:
            return cls.NONE
        if rate >= 75:
            return cls.LOW
        if rate >= 50:
            return cls.MEDIUM
        return cls.HIGH
