"""Attendance day state machine.

Primary state ``Idle -> SignedIn -> SignedOut`` with the orthogonal flags
on-lunch-break, half-day and absent-with-leave. Every transition takes the
*persisted* record (or None when the day has no record yet), validates it and
returns the record to write. Illegal transitions raise before anything is
built, so callers never persist a half-applied change.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..core.enums import ActivityState, LeaveType, PresenceStatus, WorkLocation
from ..core.exceptions import (
    AlreadyExistsError,
    AlreadyRequestedError,
    AlreadySignedInError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    NotSignedInError,
    OutOfWindowError,
)
from .accounting import close_session
from .model import AttendanceRecord, AttendanceStatusView


def derive_activity(record: Optional[AttendanceRecord]) -> ActivityState:
    if record is None:
        return ActivityState.IDLE
    if record.is_on_leave:
        return ActivityState.ABSENT_ON_LEAVE
    if record.is_signed_out:
        return ActivityState.SIGNED_OUT
    if record.sign_in_time is not None:
        if record.is_on_lunch_break:
            return ActivityState.ON_LUNCH_BREAK
        return ActivityState.SIGNED_IN
    return ActivityState.IDLE


# Lunch breaks show as "idle" to clients even though the day stays signed in.
_WIRE_STATUS = {
    ActivityState.IDLE: "idle",
    ActivityState.SIGNED_IN: "signedIn",
    ActivityState.ON_LUNCH_BREAK: "idle",
    ActivityState.SIGNED_OUT: "signedOut",
    ActivityState.ABSENT_ON_LEAVE: "idle",
}


def status_view(record: Optional[AttendanceRecord]) -> AttendanceStatusView:
    activity = derive_activity(record)
    if record is None:
        return AttendanceStatusView(status=_WIRE_STATUS[activity], activity=activity.value)
    return AttendanceStatusView(
        status=_WIRE_STATUS[activity],
        activity=activity.value,
        sign_in_time=record.sign_in_time,
        sign_out_time=record.sign_out_time,
        location=record.work_location.value if record.sign_in_time else None,
        present_absent_status=record.presence.value,
        leave_type=record.leave_type.value if record.leave_type else None,
        overtime_hours=record.overtime_hours,
        half_day=record.half_day,
        lunch_break_start=record.lunch_break_start,
        lunch_break_end=record.lunch_break_end,
        lunch_break_taken=record.lunch_break_taken,
        total_hours_worked=record.total_hours_worked if record.sign_out_time else None,
    )


def check_sign_in_window(now: datetime, *, opens_at: datetime, closes_at: datetime) -> None:
    if now < opens_at or now > closes_at:
        raise OutOfWindowError("Sign-in is only allowed during company hours")


def sign_in(
    current: Optional[AttendanceRecord],
    *,
    employee_id: int,
    day_key: datetime,
    now: datetime,
    location: WorkLocation,
    is_half_day: bool = False,
) -> AttendanceRecord:
    if current is not None:
        if current.sign_in_time is not None:
            raise AlreadySignedInError("Already signed in")
        if current.is_on_leave:
            raise ConflictError("You are on leave today")

    base = current or AttendanceRecord(employee_id=employee_id, day_key=day_key)
    return replace(
        base,
        sign_in_time=now,
        work_location=location,
        presence=PresenceStatus.PRESENT,
        half_day=base.half_day or bool(is_half_day),
    )


def sign_out(
    current: Optional[AttendanceRecord],
    *,
    at: Optional[datetime],
    lunch_duration_minutes: int,
) -> AttendanceRecord:
    if current is None or current.sign_in_time is None or current.sign_out_time is not None:
        raise NotSignedInError("Not signed in")
    return close_session(current, at, lunch_duration_minutes=lunch_duration_minutes)


def request_leave(
    current: Optional[AttendanceRecord],
    *,
    employee_id: int,
    day_key: datetime,
    leave_type: LeaveType,
) -> AttendanceRecord:
    if leave_type == LeaveType.HALF:
        raise InvalidInputError("Half-days are requested through the half-day request")
    if current is not None:
        if current.sign_in_time is not None:
            raise ConflictError("Already signed in for this date")
        if current.is_on_leave:
            raise AlreadyRequestedError("Leave already recorded for this date")
        if current.half_day:
            raise ConflictError("A half day is already requested for this date")

    base = current or AttendanceRecord(employee_id=employee_id, day_key=day_key)
    return replace(base, presence=PresenceStatus.ABSENT, leave_type=leave_type, half_day=False)


def mark_absent(
    current: Optional[AttendanceRecord],
    *,
    employee_id: int,
    day_key: datetime,
) -> Optional[AttendanceRecord]:
    """Absent without leave; a no-op (None) when the day already has a record."""
    if current is not None:
        return None
    return AttendanceRecord(employee_id=employee_id, day_key=day_key, presence=PresenceStatus.ABSENT)


def request_half_day(
    current: Optional[AttendanceRecord],
    *,
    employee_id: int,
    day_key: datetime,
    is_today: bool,
) -> AttendanceRecord:
    if is_today and current is not None and current.sign_in_time is not None:
        if current.half_day:
            raise AlreadyRequestedError("Half day already requested for today")
        if current.sign_out_time is not None:
            raise ConflictError("Already signed out for today")
        if current.overtime_hours:
            raise ConflictError("Overtime already submitted for today")
        return replace(current, half_day=True, presence=PresenceStatus.PRESENT, leave_type=None)

    if current is not None:
        raise AlreadyExistsError("Attendance already exists for this date")
    return AttendanceRecord(
        employee_id=employee_id,
        day_key=day_key,
        half_day=True,
        presence=PresenceStatus.PRESENT,
    )


def start_lunch_break(
    current: Optional[AttendanceRecord],
    *,
    now: datetime,
    accept_lunch: bool,
) -> AttendanceRecord:
    if current is None:
        raise NotFoundError("Attendance record not found")
    if not current.is_signed_in:
        raise NotSignedInError("Not signed in")
    if not accept_lunch:
        raise ConflictError("Lunch breaks are not enabled for your company")
    if current.lunch_break_taken:
        raise AlreadyRequestedError("Lunch break already taken today")
    return replace(current, lunch_break_start=now, lunch_break_taken=True)


def end_lunch_break(current: Optional[AttendanceRecord], *, now: datetime) -> AttendanceRecord:
    if current is None:
        raise NotFoundError("Attendance record not found")
    if not current.is_on_lunch_break:
        raise ConflictError("No lunch break in progress")
    if not current.is_signed_in:
        raise NotSignedInError("Not signed in")
    return replace(current, lunch_break_end=max(now, current.lunch_break_start))


def submit_overtime(current: Optional[AttendanceRecord], *, hours: float) -> AttendanceRecord:
    if current is None:
        raise NotFoundError("Attendance not found for this date")
    if current.is_on_leave:
        raise ConflictError("Cannot submit overtime on a leave day")
    if current.half_day:
        raise ConflictError("Overtime is not allowed on half days")
    if current.overtime_hours:
        raise AlreadyRequestedError("Overtime already submitted for this date")
    return replace(current, overtime_hours=float(hours))
