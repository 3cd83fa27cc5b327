from dataclasses import replace
from datetime import datetime, timezone

import pytest

from src.attendance_tracker.attendance_tracker.attendance.accounting import (
    close_session,
    compute_worked_hours,
    effective_overtime,
    is_valid_work_day,
)
from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord
from src.attendance_tracker.attendance_tracker.core.enums import PresenceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidInputError, NotSignedInError


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


# 2025-10-01 in +05:30: 09:00 local = 03:30Z, 13:00 local = 07:30Z, 17:00 local = 11:30Z
DAY = utc(2025, 9, 30, 18, 30)
NINE = utc(2025, 10, 1, 3, 30)
ONE_PM = utc(2025, 10, 1, 7, 30)
FIVE_PM = utc(2025, 10, 1, 11, 30)


def test_full_day_without_lunch_is_eight_hours():
    assert compute_worked_hours(NINE, FIVE_PM).total_hours == 8.0


def test_half_day_without_sign_out_defaults_to_four_hours():
    hours = compute_worked_hours(NINE, None, half_day=True)

    assert hours.sign_out_time == ONE_PM
    assert hours.total_hours == 4.0


def test_lunch_taken_is_subtracted():
    hours = compute_worked_hours(NINE, FIVE_PM, lunch_duration_minutes=30, lunch_taken=True)

    assert hours.base_hours == 8.0
    assert hours.lunch_hours == 0.5
    assert hours.total_hours == 7.5


def test_lunch_not_taken_is_not_subtracted():
    assert compute_worked_hours(NINE, FIVE_PM, lunch_duration_minutes=60, lunch_taken=False).total_hours == 8.0


def test_missing_bounds_give_zero():
    assert compute_worked_hours(None, FIVE_PM).total_hours == 0.0
    assert compute_worked_hours(NINE, None).total_hours == 0.0


def test_result_is_clamped_to_a_day():
    assert compute_worked_hours(NINE, utc(2025, 10, 2, 15, 30)).total_hours == 24.0
    assert compute_worked_hours(FIVE_PM, NINE).total_hours == 0.0
    assert compute_worked_hours(NINE, utc(2025, 10, 1, 3, 45), lunch_duration_minutes=60, lunch_taken=True).total_hours == 0.0


def test_compute_is_pure():
    first = compute_worked_hours(NINE, FIVE_PM, lunch_duration_minutes=30, lunch_taken=True)
    second = compute_worked_hours(NINE, FIVE_PM, lunch_duration_minutes=30, lunch_taken=True)

    assert first == second


def test_rounding_to_two_decimals():
    # 7h 20m -> 7.33
    assert compute_worked_hours(NINE, utc(2025, 10, 1, 10, 50)).total_hours == 7.33


def test_close_session_auto_closes_open_lunch():
    record = AttendanceRecord(
        employee_id=1,
        day_key=DAY,
        sign_in_time=NINE,
        presence=PresenceStatus.PRESENT,
        lunch_break_start=ONE_PM,
        lunch_break_taken=True,
    )

    closed = close_session(record, FIVE_PM, lunch_duration_minutes=30)

    assert closed.lunch_break_end == utc(2025, 10, 1, 8, 0)
    assert closed.sign_out_time == FIVE_PM
    assert closed.total_hours_worked == 7.5
    assert closed.presence == PresenceStatus.PRESENT


def test_close_session_never_ends_lunch_after_sign_out():
    record = AttendanceRecord(employee_id=1, day_key=DAY, sign_in_time=NINE, lunch_break_start=ONE_PM, lunch_break_taken=True)

    closed = close_session(record, utc(2025, 10, 1, 7, 45), lunch_duration_minutes=60)

    assert closed.lunch_break_end == utc(2025, 10, 1, 7, 45)


def test_close_session_validates_bounds():
    with pytest.raises(NotSignedInError):
        close_session(AttendanceRecord(employee_id=1, day_key=DAY), FIVE_PM, lunch_duration_minutes=0)

    record = AttendanceRecord(employee_id=1, day_key=DAY, sign_in_time=FIVE_PM)
    with pytest.raises(InvalidInputError):
        close_session(record, NINE, lunch_duration_minutes=0)
    with pytest.raises(InvalidInputError):
        close_session(record, None, lunch_duration_minutes=0)


def test_close_session_half_day_derives_sign_out():
    record = AttendanceRecord(employee_id=1, day_key=DAY, sign_in_time=NINE, half_day=True)

    closed = close_session(record, None, lunch_duration_minutes=30)

    assert closed.sign_out_time == ONE_PM
    assert closed.total_hours_worked == 4.0


def test_overtime_and_valid_day_rules():
    full = AttendanceRecord(employee_id=1, day_key=DAY, overtime_hours=2.0, total_hours_worked=8.0)
    half = replace(full, half_day=True, total_hours_worked=4.0)

    assert effective_overtime(full) == 2.0
    assert effective_overtime(half) == 0.0
    assert is_valid_work_day(full)
    assert is_valid_work_day(half)
    assert not is_valid_work_day(replace(full, total_hours_worked=7.99))
