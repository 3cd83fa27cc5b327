from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord
from src.attendance_tracker.attendance_tracker.core.enums import LeaveType, PresenceStatus, WorkLocation
from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidInputError
from src.attendance_tracker.attendance_tracker.employees.model import Employee
from src.attendance_tracker.attendance_tracker.reports.service import AttendanceReportService, parse_date_range
from tests.fakes import FakeAttendanceRepo, FakeCompanyRepo, FakeEmployeeRepo, demo_company, utc


def worked(day_key, sign_in, hours, location, **kw):
    return AttendanceRecord(
        employee_id=1,
        day_key=day_key,
        sign_in_time=sign_in,
        sign_out_time=sign_in,
        work_location=location,
        presence=PresenceStatus.PRESENT,
        total_hours_worked=hours,
        **kw,
    )


def make_report_service():
    attendance = FakeAttendanceRepo()
    employees = FakeEmployeeRepo(Employee(employee_id=1, company_id=1, full_name="Asha", email="a@example.com"))
    service = AttendanceReportService(attendance, employees, FakeCompanyRepo(demo_company()))
    return service, attendance


def test_week_summary_counts_missing_past_days_as_absent():
    service, attendance = make_report_service()
    # Mon 2025-09-29 .. Thu 2025-10-02 local (+05:30)
    attendance.put(worked(utc(2025, 9, 28, 18, 30), utc(2025, 9, 29, 3, 30), 8.0, WorkLocation.OFFICE, overtime_hours=2.0))
    attendance.put(worked(utc(2025, 9, 29, 18, 30), utc(2025, 9, 30, 3, 30), 7.5, WorkLocation.HOME))
    attendance.put(AttendanceRecord(employee_id=1, day_key=utc(2025, 9, 30, 18, 30), leave_type=LeaveType.SICK))
    attendance.put(worked(utc(2025, 10, 1, 18, 30), utc(2025, 10, 2, 3, 30), 4.0, WorkLocation.HOME, half_day=True))

    data = service.build_attendance_report(1, start="2025-09-29", end="2025-10-05", now=utc(2025, 10, 3, 13, 30))

    assert [r["date"] for r in data.rows] == ["2025-09-29", "2025-09-30", "2025-10-01", "2025-10-02", "2025-10-03"]
    assert data.rows[2]["leaveType"] == "sick"
    assert data.rows[4]["absent"] == 1
    assert [r["validWorkDay"] for r in data.rows] == [1, 0, 0, 1, 0]
    assert data.summary == {
        "totalDays": 5,
        "presentDays": 3,
        "absentDays": 2,
        "halfDays": 1,
        "validWorkDays": 2,
        "workFromHome": 2,
        "workFromOffice": 1,
        "totalHoursWorked": 19.5,
        "averageHoursPerDay": 3.9,
        "overtimeHours": 2.0,
        "attendanceRate": 60.0,
        "totalOfficeHours": 8.0,
        "totalHomeHours": 11.5,
    }


def test_weekend_records_are_included_but_empty_weekends_are_not():
    service, attendance = make_report_service()
    # Saturday 2025-10-04 local
    attendance.put(worked(utc(2025, 10, 3, 18, 30), utc(2025, 10, 4, 3, 30), 3.0, WorkLocation.HOME))

    data = service.build_attendance_report(1, start=date(2025, 10, 4), end=date(2025, 10, 5), now=utc(2025, 10, 6, 6, 0))

    assert [r["date"] for r in data.rows] == ["2025-10-04"]
    assert data.summary["attendanceRate"] == 100.0


def test_empty_range_has_zero_rates():
    service, _ = make_report_service()

    data = service.build_attendance_report(1, start="2025-10-10", end="2025-10-12", now=utc(2025, 10, 1, 6, 0))

    assert data.rows == []
    assert data.summary["averageHoursPerDay"] == 0
    assert data.summary["attendanceRate"] == 0


def test_parse_date_range():
    assert parse_date_range("2025-10-01_to_2025-10-31") == (date(2025, 10, 1), date(2025, 10, 31))
    with pytest.raises(InvalidInputError):
        parse_date_range("2025-10-01")
    with pytest.raises(InvalidInputError):
        parse_date_range("2025-10-31_to_2025-10-01")
    with pytest.raises(InvalidInputError):
        parse_date_range("2024-01-01_to_2025-10-01")
