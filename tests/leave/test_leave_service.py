from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord
from src.attendance_tracker.attendance_tracker.core.enums import LeaveKind, LeaveType, PresenceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import NotFoundError, QuotaExceededError
from src.attendance_tracker.attendance_tracker.employees.model import Employee
from src.attendance_tracker.attendance_tracker.leave.service import LeaveService, remaining
from tests.fakes import FakeAttendanceRepo, FakeEmployeeRepo, FakeLeaveRepo, demo_company, utc


def make(**employee_kw):
    attendance = FakeAttendanceRepo()
    leaves = FakeLeaveRepo()
    employees = FakeEmployeeRepo(Employee(employee_id=1, company_id=1, full_name="Asha", email="a@example.com", **employee_kw))
    return LeaveService(leaves, employees, attendance), attendance, leaves


def test_remaining_floors_at_zero_and_none_is_unbounded():
    assert remaining(7, 2) == 5
    assert remaining(1, 3) == 0
    assert remaining(None, 10) is None


def test_balance_for_fresh_month():
    service, _, _ = make(sick_days_per_month=7, half_days_per_month=2)

    balance = service.balance(1, date(2025, 10, 15)).to_dict()

    assert balance == {
        "period": "2025-10",
        "sickLeaves": 0,
        "halfDayLeaves": 0,
        "sickDaysPerMonth": 7,
        "halfDaysPerMonth": 2,
        "sickRemaining": 7,
        "halfDayRemaining": 2,
    }


def test_reserve_until_exhausted_then_release():
    service, _, leaves = make(sick_days_per_month=2)
    day = date(2025, 10, 1)

    service.reserve(1, LeaveKind.SICK, day)
    service.reserve(1, LeaveKind.SICK, day)
    with pytest.raises(QuotaExceededError):
        service.reserve(1, LeaveKind.SICK, day)
    assert service.balance(1, day).sick_remaining == 0

    service.release(1, LeaveKind.SICK, day)
    assert service.balance(1, day).sick_remaining == 1

    # a new month starts from zero
    service.reserve(1, LeaveKind.SICK, date(2025, 11, 1))
    assert leaves.get(1, "2025-11").sick_leaves == 1


def test_release_without_reservation_is_harmless():
    service, _, leaves = make()

    service.release(1, LeaveKind.HALF_DAY, date(2025, 10, 1))

    assert leaves.get(1, "2025-10") is None


def test_rebuild_recounts_from_records():
    service, attendance, leaves = make()
    tz = demo_company().tz
    leaves.set_counts(1, "2025-10", sick_leaves=5, half_day_leaves=5)

    attendance.put(AttendanceRecord(employee_id=1, day_key=utc(2025, 10, 1, 18, 30), leave_type=LeaveType.SICK))
    attendance.put(AttendanceRecord(employee_id=1, day_key=utc(2025, 10, 2, 18, 30), half_day=True, presence=PresenceStatus.PRESENT))
    # 2025-11-01 local, outside the month
    attendance.put(AttendanceRecord(employee_id=1, day_key=utc(2025, 10, 31, 18, 30), leave_type=LeaveType.SICK))

    counter = service.rebuild(1, date(2025, 10, 20), tz)

    assert (counter.sick_leaves, counter.half_day_leaves) == (1, 1)
    assert leaves.get(1, "2025-10").sick_leaves == 1


def test_unknown_employee_has_no_balance():
    service, _, _ = make()

    with pytest.raises(NotFoundError):
        service.balance(42, date(2025, 10, 1))
