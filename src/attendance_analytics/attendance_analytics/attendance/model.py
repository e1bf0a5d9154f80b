from __future__ import annotations

import json
from dataclasses import astuple, dataclass, fields
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class DepartmentInfo:
    """Department attributes denormalized onto an event through its student."""

    department_id: int
    name: str
    code: Optional[str] = None


@dataclass(frozen=True)
class AttendanceEvent:
    """One attendance scan/record. Immutable once fetched."""

    attendance_id: int
    status: AttendanceStatus
    timestamp: datetime
    student_id: Optional[int]
    department: Optional[DepartmentInfo] = None
    course_id: Optional[int] = None
    year_level: Optional[str] = None
    student_id_num: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def student_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


@dataclass(frozen=True)
class AnalyticsFilters:
    """Raw filter set received from the caller.

    ``None`` means "no filter". Values stay as strings because department and
    course accept either a numeric id or a code.
    """

    type: str = "student"
    time_range: str = "week"
    department_id: Optional[str] = None
    risk_level: Optional[str] = None
    subject_id: Optional[str] = None
    course_id: Optional[str] = None
    section_id: Optional[str] = None
    year_level: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def cache_key(self) -> str:
        # JSON keeps field boundaries unambiguous, so any difference is a miss.
        return json.dumps(list(astuple(self)), separators=(",", ":"))

    def as_log_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}
