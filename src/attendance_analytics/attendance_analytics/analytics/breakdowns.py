"""Aggregates that group by entity (department, student) instead of time."""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent, DepartmentInfo
from ..core.enums import RiskTier
from .reducer import BucketCounts, BucketedReducer, percentage


def department_stats(events: Sequence[AttendanceEvent]) -> list[dict]:
    """Per-department totals, keyed by department name.

    Events without a department are skipped. Only departments present in the
    events appear; there is no fixed universe to fill in.
    """
    departments: dict[str, DepartmentInfo] = {}

    def key(event: AttendanceEvent) -> Optional[str]:
        if event.department is None:
            return None
        departments.setdefault(event.department.name, event.department)
        return event.department.name

    groups = BucketedReducer(key).reduce(events)

    out = []
    for name, counts in groups.items():
        dept = departments[name]
        out.append(
            {
                "departmentId": dept.department_id,
                "name": dept.name,
                "code": dept.code,
                "totalClasses": counts.total,
                "attendedClasses": counts.attended,
                "attendanceRate": counts.attendance_rate,
                "count": counts.total,
            }
        )
    return out


def risk_levels(events: Sequence[AttendanceEvent]) -> list[dict]:
    """Number of students per risk tier.

    Each student with at least one event lands in exactly one tier. Tiers with
    no students are omitted.
    """
    per_student = BucketedReducer(lambda e: e.student_id).reduce(events)

    tally = {tier: 0 for tier in RiskTier}
    for counts in per_student.values():
        tally[RiskTier.for_rate(counts.attendance_rate)] += 1

    return [{"level": tier.value, "count": n} for tier, n in tally.items() if n > 0]


def summarize(events: Sequence[AttendanceEvent], *, total_students: int) -> dict:
    overall = BucketCounts()
    for event in events:
        overall.add(event.status)

    return {
        "totalStudents": total_students,
        "uniqueStudentsWithAttendance": len({e.student_id for e in events if e.student_id is not None}),
        "presentCount": overall.present,
        "lateCount": overall.late,
        "absentCount": overall.absent,
        "excusedCount": overall.excused,
        "totalAttendance": overall.total,
        "attendanceRate": overall.attendance_rate,
    }


def rank_absentees(events: Sequence[AttendanceEvent], *, q: str = "", limit: int) -> dict:
    """Students ordered by absences (desc), then total events (desc), then name."""
    profiles: dict[int, AttendanceEvent] = {}
    last_seen: dict[int, datetime] = {}

    def key(event: AttendanceEvent) -> Optional[int]:
        sid = event.student_id
        if sid is None:
            return None
        profiles.setdefault(sid, event)
        if sid not in last_seen or event.timestamp > last_seen[sid]:
            last_seen[sid] = event.timestamp
        return sid

    per_student = BucketedReducer(key).reduce(events)

    items = []
    for sid, counts in per_student.items():
        profile = profiles[sid]
        items.append(
            {
                "studentId": sid,
                "idNumber": profile.student_id_num or "",
                "firstName": profile.first_name or "",
                "lastName": profile.last_name or "",
                "name": profile.student_name,
                "absent": counts.absent,
                "present": counts.present,
                "late": counts.late,
                "excused": counts.excused,
                "total": counts.total,
                "absencePct": round(percentage(counts.absent, counts.total)),
                "lastSeen": last_seen[sid].isoformat(),
            }
        )

    needle = (q or "").strip().lower()
    if needle:
        items = [it for it in items if needle in f"{it['idNumber']} {it['name']}".lower()]

    items.sort(key=lambda it: (-it["absent"], -it["total"], it["name"].lower()))

    total_absences = sum(it["absent"] for it in items)
    overall_events = sum(it["total"] for it in items)
    return {
        "items": items[:limit],
        "meta": {
            "uniqueStudents": len(items),
            "absenceRate": round(percentage(total_absences, overall_events)),
        },
    }
