from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LeaveType, PresenceStatus, WorkLocation


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi chấm công của một nhân viên trong một ngày.

    ``day_key`` is the UTC instant of local midnight for the company's
    offset. All instants are timezone-aware UTC. ``version`` is bumped on every
    successful write and is what conditional updates match on.
    """

    employee_id: int
    day_key: datetime
    sign_in_time: Optional[datetime] = None
    sign_out_time: Optional[datetime] = None
    work_location: WorkLocation = WorkLocation.OFFICE
    lunch_break_start: Optional[datetime] = None
    lunch_break_end: Optional[datetime] = None
    lunch_break_taken: bool = False
    presence: PresenceStatus = PresenceStatus.ABSENT
    half_day: bool = False
    leave_type: Optional[LeaveType] = None
    overtime_hours: float = 0.0
    total_hours_worked: float = 0.0
    record_id: Optional[int] = None
    version: int = 0

    @property
    def is_signed_in(self) -> bool:
        return self.sign_in_time is not None and self.sign_out_time is None

    @property
    def is_signed_out(self) -> bool:
        return self.sign_out_time is not None

    @property
    def is_on_lunch_break(self) -> bool:
        return self.lunch_break_start is not None and self.lunch_break_end is None

    @property
    def is_on_leave(self) -> bool:
        return self.presence == PresenceStatus.ABSENT and self.leave_type is not None


@dataclass(frozen=True)
class AttendanceStatusView:
    """Read-model trả về cho client (trạng thái ngày hiện tại)."""

    status: str
    activity: str
    sign_in_time: Optional[datetime] = None
    sign_out_time: Optional[datetime] = None
    location: Optional[str] = None
    present_absent_status: Optional[str] = None
    leave_type: Optional[str] = None
    overtime_hours: float = 0.0
    half_day: bool = False
    lunch_break_start: Optional[datetime] = None
    lunch_break_end: Optional[datetime] = None
    lunch_break_taken: bool = False
    total_hours_worked: Optional[float] = None

    def to_dict(self) -> dict:
        def iso(v: Optional[datetime]) -> Optional[str]:
            return v.isoformat().replace("+00:00", "Z") if v else None

        return {
            "status": self.status,
            "activity": self.activity,
            "signInTime": iso(self.sign_in_time),
            "signOutTime": iso(self.sign_out_time),
            "location": self.location,
            "presentAbsentStatus": self.present_absent_status,
            "leaveType": self.leave_type,
            "overtimeHours": self.overtime_hours,
            "halfDay": self.half_day,
            "lunchBreakStart": iso(self.lunch_break_start),
            "lunchBreakEnd": iso(self.lunch_break_end),
            "lunchBreakTaken": self.lunch_break_taken,
            "totalHoursWorked": self.total_hours_worked,
        }
