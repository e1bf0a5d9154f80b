from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.validators import optional_filter, require_int
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AnalyticsFilters, AttendanceEvent, DepartmentInfo
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _as_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def _student_clauses(filters: AnalyticsFilters) -> tuple[list[str], list[object]]:
    """WHERE clauses on the student (alias ``s``) shared by events and head counts."""
    clauses: list[str] = []
    params: list[object] = []

    department = optional_filter(filters.department_id)
    if department is not None:
        dept_id = _as_int(department)
        if dept_id is not None:
            clauses.append("s.department_id=%s")
            params.append(dept_id)
        else:
            clauses.append("d.department_code=%s")
            params.append(department)

    course = optional_filter(filters.course_id)
    if course is not None:
        course_id = _as_int(course)
        if course_id is not None:
            clauses.append("s.course_id=%s")
            params.append(course_id)
        else:
            clauses.append("sc.course_code=%s")
            params.append(course)

    year_level = optional_filter(filters.year_level)
    if year_level is not None:
        clauses.append("s.year_level=%s")
        params.append(year_level)

    return clauses, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_events(
        self,
        *,
        filters: AnalyticsFilters,
        start: datetime,
        end: datetime,
        limit: int,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["a.timestamp BETWEEN %s AND %s"]
        params: list[object] = [start, end]

        student_clauses, student_params = _student_clauses(filters)
        clauses.extend(student_clauses)
        params.extend(student_params)

        subject = optional_filter(filters.subject_id)
        if subject is not None:
            clauses.append("subj.subject_id=%s")
            params.append(require_int(subject, "subjectId"))

        # The course filter also applies to the scheduled subject's course.
        course = optional_filter(filters.course_id)
        if course is not None:
            course_id = _as_int(course)
            if course_id is not None:
                clauses.append("subj.course_id=%s")
                params.append(course_id)
            else:
                clauses.append("subj_c.course_code=%s")
                params.append(course)

        section = optional_filter(filters.section_id)
        if section is not None:
            clauses.append("sched.section_id=%s")
            params.append(require_int(section, "sectionId"))

        where = " AND ".join(clauses)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.attendance_id, a.status, a.timestamp, a.student_id,
                    s.student_id_num, s.first_name, s.last_name, s.course_id, s.year_level,
                    d.department_id, d.department_name, d.department_code
                FROM attendance a
                LEFT JOIN students s ON s.student_id = a.student_id
                LEFT JOIN departments d ON d.department_id = s.department_id
                LEFT JOIN courses sc ON sc.course_id = s.course_id
                LEFT JOIN subject_schedules sched ON sched.subject_sched_id = a.subject_sched_id
                LEFT JOIN subjects subj ON subj.subject_id = sched.subject_id
                LEFT JOIN courses subj_c ON subj_c.course_id = subj.course_id
                WHERE {where}
                ORDER BY a.timestamp DESC
                LIMIT %s
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        logger.debug("Fetched %d attendance rows for %s..%s", len(rows), start, end)
        return [
            AttendanceEvent(
                attendance_id=int(r["attendance_id"]),
                status=AttendanceStatus(r["status"]),
                timestamp=r["timestamp"],
                student_id=int(r["student_id"]) if r.get("student_id") is not None else None,
                department=(
                    DepartmentInfo(
                        department_id=int(r["department_id"]),
                        name=r["department_name"],
                        code=r.get("department_code"),
                    )
                    if r.get("department_id") is not None
                    else None
                ),
                course_id=r.get("course_id"),
                year_level=r.get("year_level"),
                student_id_num=r.get("student_id_num"),
                first_name=r.get("first_name"),
                last_name=r.get("last_name"),
            )
            for r in rows
        ]

    def count_students(self, *, filters: AnalyticsFilters) -> int:
        clauses, params = _student_clauses(filters)

        section = optional_filter(filters.section_id)
        if section is not None:
            clauses.append(
                "EXISTS (SELECT 1 FROM student_sections ss WHERE ss.student_id = s.student_id AND ss.section_id=%s)"
            )
            params.append(require_int(section, "sectionId"))

        where = " AND ".join(clauses) if clauses else "1=1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM students s
                LEFT JOIN departments d ON d.department_id = s.department_id
                LEFT JOIN courses sc ON sc.course_id = s.course_id
                WHERE {where}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0
