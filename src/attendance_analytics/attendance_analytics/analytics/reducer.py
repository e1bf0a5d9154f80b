from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Iterable, Optional, TypeVar

from ..attendance.model import AttendanceEvent
from ..core.enums import AttendanceStatus

K = TypeVar("K", bound=Hashable)


def percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


@dataclass
class BucketCounts:
    """Running per-status counters for one group of events."""

    present: int = 0
    late: int = 0
    absent: int = 0
    excused: int = 0
    total: int = 0

    def add(self, status: AttendanceStatus) -> None:
        self.total += 1
        if status is AttendanceStatus.PRESENT:
            self.present += 1
        elif status is AttendanceStatus.LATE:
            self.late += 1
        elif status is AttendanceStatus.ABSENT:
            self.absent += 1
        elif status is AttendanceStatus.EXCUSED:
            self.excused += 1

    @property
    def attended(self) -> int:
        return self.present + self.late

    @property
    def attendance_rate(self) -> float:
        return percentage(self.attended, self.total)

    @property
    def late_rate(self) -> float:
        return percentage(self.late, self.total)


class BucketedReducer(Generic[K]):
    """Single forward pass that groups events and accumulates status counters.

    ``key_fn`` returns the group key for an event, or ``None`` to skip it.
    Groups keep first-seen order.
    """

    def __init__(self, key_fn: Callable[[AttendanceEvent], Optional[K]]):
        self._key_fn = key_fn

    def reduce(self, events: Iterable[AttendanceEvent]) -> Dict[K, BucketCounts]:
        groups: Dict[K, BucketCounts] = {}
        for event in events:
            key = self._key_fn(event)
            if key is None:
                continue
            counts = groups.get(key)
            if counts is None:
                counts = groups[key] = BucketCounts()
            counts.add(event.status)
        return groups
