"""Worked-hours arithmetic shared by interactive sign-out and the reconciler.

Everything here is pure: same inputs, same outputs, no I/O. Both closing
paths go through :func:`close_session` so a day's total never depends on
which path closed it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import FULL_DAY_HOURS, HALF_DAY_HOURS, MAX_HOURS_PER_DAY
from ..core.enums import PresenceStatus
from ..core.exceptions import InvalidInputError, NotSignedInError
from .model import AttendanceRecord


@dataclass(frozen=True)
class WorkedHours:
    sign_out_time: Optional[datetime]
    base_hours: float
    lunch_hours: float
    total_hours: float


def _clamp(hours: float) -> float:
    return round(min(max(hours, 0.0), float(MAX_HOURS_PER_DAY)), 2)


def compute_worked_hours(
    sign_in_time: Optional[datetime],
    sign_out_time: Optional[datetime],
    *,
    half_day: bool = False,
    lunch_duration_minutes: int = 0,
    lunch_taken: bool = False,
) -> WorkedHours:
    """Hours between sign-in and sign-out, minus lunch, clamped to [0, 24].

    A half-day without a sign-out gets the default sign-out of sign-in plus
    four hours. ``lunch_taken`` means a lunch break with both bounds known.
    """
    if half_day and sign_in_time is not None and sign_out_time is None:
        sign_out_time = sign_in_time + timedelta(hours=HALF_DAY_HOURS)

    if sign_in_time is None or sign_out_time is None:
        return WorkedHours(sign_out_time=sign_out_time, base_hours=0.0, lunch_hours=0.0, total_hours=0.0)

    base = round(max(0.0, (sign_out_time - sign_in_time).total_seconds() / 3600), 2)
    lunch = 0.0
    if lunch_taken and lunch_duration_minutes:
        lunch = round(lunch_duration_minutes / 60, 2)

    return WorkedHours(
        sign_out_time=sign_out_time,
        base_hours=base,
        lunch_hours=lunch,
        total_hours=_clamp(base - lunch),
    )


def close_open_lunch(record: AttendanceRecord, *, lunch_duration_minutes: int, not_after: Optional[datetime]) -> AttendanceRecord:
    """End a lunch break that was started but never ended."""
    if not record.is_on_lunch_break:
        return record
    lunch_end = record.lunch_break_start + timedelta(minutes=lunch_duration_minutes)
    if not_after is not None and lunch_end > not_after:
        lunch_end = max(record.lunch_break_start, not_after)
    return replace(record, lunch_break_end=lunch_end, lunch_break_taken=True)


def close_session(
    record: AttendanceRecord,
    sign_out_time: Optional[datetime],
    *,
    lunch_duration_minutes: int,
) -> AttendanceRecord:
    """Sign the record out at ``sign_out_time`` and store the final total.

    ``sign_out_time=None`` is only meaningful for half-days (default length).
    """
    if record.sign_in_time is None:
        raise NotSignedInError("Not signed in")
    if sign_out_time is not None and sign_out_time < record.sign_in_time:
        raise InvalidInputError("Sign-out time cannot be before sign-in time")

    if sign_out_time is None and record.half_day:
        sign_out_time = record.sign_in_time + timedelta(hours=HALF_DAY_HOURS)
    if sign_out_time is None:
        raise InvalidInputError("Sign-out time is required")

    record = close_open_lunch(record, lunch_duration_minutes=lunch_duration_minutes, not_after=sign_out_time)
    hours = compute_worked_hours(
        record.sign_in_time,
        sign_out_time,
        half_day=record.half_day,
        lunch_duration_minutes=lunch_duration_minutes,
        lunch_taken=record.lunch_break_start is not None and record.lunch_break_end is not None,
    )
    return replace(
        record,
        sign_out_time=hours.sign_out_time,
        total_hours_worked=hours.total_hours,
        presence=PresenceStatus.PRESENT,
    )


def effective_overtime(record: AttendanceRecord) -> float:
    return 0.0 if record.half_day else float(record.overtime_hours or 0.0)


def is_valid_work_day(record: AttendanceRecord) -> bool:
    required = HALF_DAY_HOURS if record.half_day else FULL_DAY_HOURS
    return record.total_hours_worked >= required
