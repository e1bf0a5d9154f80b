from __future__ import annotations

import json
from datetime import datetime

import pytest

from src.attendance_analytics.attendance_analytics.analytics.cache import AnalyticsCache
from src.attendance_analytics.attendance_analytics.analytics.service import AnalyticsService
from src.attendance_analytics.attendance_analytics.attendance.model import (
    AnalyticsFilters,
    AttendanceEvent,
    DepartmentInfo,
)
from src.attendance_analytics.attendance_analytics.core.enums import AttendanceStatus
from src.attendance_analytics.attendance_analytics.core.exceptions import DataSourceError, ValidationError

NOW = datetime(2025, 1, 15, 12, 0)


class FakeAttendanceRepo:
    def __init__(self, events=None, *, students: int = 0):
        self._events = list(events or [])
        self._students = students
        self.calls = 0
        self.last_args = None

    def find_events(self, *, filters, start, end, limit):
        self.calls += 1
        self.last_args = {"filters": filters, "start": start, "end": end, "limit": limit}
        matched = [e for e in self._events if start <= e.timestamp <= end]
        matched.sort(key=lambda e: e.timestamp, reverse=True)
        return matched[:limit]

    def count_students(self, *, filters):
        return self._students


class BrokenRepo(FakeAttendanceRepo):
    def find_events(self, **kwargs):
        raise DataSourceError("connection refused")


class ExplodingCache(AnalyticsCache):
    def set(self, key, value):
        raise RuntimeError("cache backend down")


def _service(repo, **kwargs) -> AnalyticsService:
    return AnalyticsService(repo, AnalyticsCache(), clock=lambda: NOW, **kwargs)


def _present(i: int, ts: datetime, student_id: int = 1) -> AttendanceEvent:
    return AttendanceEvent(attendance_id=i, status=AttendanceStatus.PRESENT, timestamp=ts, student_id=student_id)


def test_empty_input_gives_zero_summary_and_dense_series():
    svc = _service(FakeAttendanceRepo(students=12))

    result = svc.get_analytics(AnalyticsFilters(time_range="today"))
    data = result["data"]

    assert result["success"] is True
    assert data["summary"]["totalAttendance"] == 0
    assert data["summary"]["attendanceRate"] == 0
    assert data["summary"]["totalStudents"] == 12
    assert data["departmentStats"] == []
    assert data["riskLevelData"] == []
    for series in (data["timeBasedData"], data["lateArrivalData"], data["patternData"], data["streakData"]["data"]):
        assert [r["hour"] for r in series] == [str(h) for h in range(24)]
        assert all(r.get("totalCount", r.get("totalClasses", r.get("totalStudents"))) == 0 for r in series)


def test_single_present_event_in_week():
    repo = FakeAttendanceRepo([_present(1, datetime(2025, 1, 15, 9, 0))])
    svc = _service(repo)

    data = svc.get_analytics(AnalyticsFilters(time_range="week"))["data"]
    rows = data["timeBasedData"]

    assert [r["date"] for r in rows] == [f"2025-01-{d}" for d in range(12, 19)]
    hit = next(r for r in rows if r["date"] == "2025-01-15")
    assert hit["presentCount"] == 1
    assert hit["totalCount"] == 1
    assert hit["attendanceRate"] == 100
    assert all(r["totalCount"] == 0 and r["attendanceRate"] == 0 for r in rows if r is not hit)


def test_week_range_is_sunday_to_saturday_end_of_day():
    repo = FakeAttendanceRepo()
    _service(repo).get_analytics(AnalyticsFilters(time_range="week"))

    assert repo.last_args["start"] == datetime(2025, 1, 12)
    assert repo.last_args["end"] == datetime(2025, 1, 18, 23, 59, 59, 999999)
    assert repo.last_args["limit"] == 10_000


def test_explicit_dates_override_time_range():
    repo = FakeAttendanceRepo()
    _service(repo).get_analytics(
        AnalyticsFilters(time_range="month", start_date="2025-03-01", end_date="2025-03-03")
    )

    assert repo.last_args["start"] == datetime(2025, 3, 1)
    assert repo.last_args["end"] == datetime(2025, 3, 3, 23, 59, 59, 999999)


def test_invalid_dates_raise_before_fetch():
    repo = FakeAttendanceRepo()
    svc = _service(repo)

    with pytest.raises(ValidationError):
        svc.get_analytics(AnalyticsFilters(start_date="not-a-date", end_date="2025-03-03"))
    assert repo.calls == 0


def test_identical_filters_are_served_from_cache():
    repo = FakeAttendanceRepo([_present(1, datetime(2025, 1, 14, 8))], students=3)
    svc = _service(repo)
    filters = AnalyticsFilters(time_range="week", department_id="CIT")

    first = svc.get_analytics(filters)
    second = svc.get_analytics(AnalyticsFilters(time_range="week", department_id="CIT"))

    assert repo.calls == 1
    assert json.dumps(first["data"], sort_keys=True) == json.dumps(second["data"], sort_keys=True)


def test_any_filter_difference_is_a_cache_miss():
    repo = FakeAttendanceRepo()
    svc = _service(repo)

    svc.get_analytics(AnalyticsFilters(time_range="week"))
    svc.get_analytics(AnalyticsFilters(time_range="week", risk_level="high"))
    svc.get_analytics(AnalyticsFilters(time_range="week", section_id="1"))

    assert repo.calls == 3


def test_no_cache_always_recomputes_and_does_not_store():
    repo = FakeAttendanceRepo()
    svc = _service(repo)
    filters = AnalyticsFilters(time_range="week")

    svc.get_analytics(filters, no_cache=True)
    svc.get_analytics(filters, no_cache=True)
    assert repo.calls == 2

    svc.get_analytics(filters)
    svc.get_analytics(filters)
    assert repo.calls == 3

    svc.get_analytics(filters, no_cache=True)
    assert repo.calls == 4


def test_cache_write_failure_still_returns_result():
    repo = FakeAttendanceRepo([_present(1, datetime(2025, 1, 15, 9))])
    svc = AnalyticsService(repo, ExplodingCache(), clock=lambda: NOW)

    result = svc.get_analytics(AnalyticsFilters(time_range="week"))

    assert result["data"]["summary"]["presentCount"] == 1


def test_data_source_failure_propagates():
    svc = _service(BrokenRepo())
    with pytest.raises(DataSourceError):
        svc.get_analytics(AnalyticsFilters(time_range="week"))


def test_year_view_and_breakdowns_from_one_batch():
    cit = DepartmentInfo(department_id=1, name="College of IT", code="CIT")
    events = [
        AttendanceEvent(1, AttendanceStatus.PRESENT, datetime(2025, 1, 6, 8), 1, cit),
        AttendanceEvent(2, AttendanceStatus.LATE, datetime(2025, 1, 7, 8), 1, cit),
        AttendanceEvent(3, AttendanceStatus.ABSENT, datetime(2025, 3, 3, 8), 2, cit),
        AttendanceEvent(4, AttendanceStatus.EXCUSED, datetime(2025, 3, 4, 8), 2, None),
    ]
    svc = _service(FakeAttendanceRepo(events, students=2))

    data = svc.get_analytics(AnalyticsFilters(time_range="year"))["data"]

    assert [r["month"] for r in data["timeBasedData"]] == [str(m) for m in range(1, 13)]
    assert data["timeBasedData"][0]["totalCount"] == 2
    assert data["timeBasedData"][2]["absentCount"] == 1
    assert data["timeBasedData"][2]["excusedCount"] == 1
    assert data["departmentStats"][0]["totalClasses"] == 3
    assert data["riskLevelData"] == [{"level": "none", "count": 1}, {"level": "high", "count": 1}]
    assert data["streakData"]["stats"]["currentStreak"] == 0
    assert data["summary"]["uniqueStudentsWithAttendance"] == 2


def test_records_are_capped_by_max_records():
    events = [_present(i, datetime(2025, 1, 13, 8, i)) for i in range(10)]
    repo = FakeAttendanceRepo(events)
    svc = _service(repo, max_records=4)

    data = svc.get_analytics(AnalyticsFilters(time_range="week"))["data"]

    assert repo.last_args["limit"] == 4
    assert data["summary"]["totalAttendance"] == 4


def test_top_absentees_validates_dates():
    svc = _service(FakeAttendanceRepo())

    with pytest.raises(ValidationError):
        svc.top_absentees(AnalyticsFilters(), start="", end="2025-01-31")
    with pytest.raises(ValidationError):
        svc.top_absentees(AnalyticsFilters(), start="2025-02-01", end="2025-01-31")


def test_top_absentees_meta_echoes_range():
    events = [
        AttendanceEvent(1, AttendanceStatus.ABSENT, datetime(2025, 1, 10, 8), 7, first_name="Ana", last_name="Reyes"),
        AttendanceEvent(2, AttendanceStatus.PRESENT, datetime(2025, 2, 10, 8), 7, first_name="Ana", last_name="Reyes"),
    ]
    svc = _service(FakeAttendanceRepo(events))

    ranking = svc.top_absentees(AnalyticsFilters(), start="2025-01-01", end="2025-01-31", limit=5)

    assert ranking["items"][0]["total"] == 1
    assert ranking["meta"] == {"uniqueStudents": 1, "absenceRate": 100, "start": "2025-01-01", "end": "2025-01-31"}
