from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Optional

from ..attendance.accounting import effective_overtime, is_valid_work_day
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.clock import (
    DayLike,
    ensure_aware,
    local_day_of,
    local_midnight_to_utc,
    next_local_midnight_to_utc,
    parse_local_date,
    utc_now,
)
from ..companies.repository import CompanyRepository
from ..core.enums import PresenceStatus, WorkLocation
from ..core.exceptions import InvalidInputError, NotFoundError
from ..employees.repository import EmployeeRepository

MAX_REPORT_DAYS = 366


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


def parse_date_range(value: str) -> tuple[date, date]:
    """Parse ``YYYY-MM-DD_to_YYYY-MM-DD``."""
    parts = (value or "").split("_to_")
    if len(parts) != 2:
        raise InvalidInputError("dateRange must look like YYYY-MM-DD_to_YYYY-MM-DD")
    start, end = parse_local_date(parts[0]), parse_local_date(parts[1])
    if end < start:
        raise InvalidInputError("dateRange end is before start")
    if (end - start).days + 1 > MAX_REPORT_DAYS:
        raise InvalidInputError(f"dateRange cannot exceed {MAX_REPORT_DAYS} days")
    return start, end


def _row(day: date, record: Optional[AttendanceRecord]) -> dict:
    if record is None:
        return {
            "date": day.isoformat(),
            "present": 0,
            "absent": 1,
            "halfDay": 0,
            "workFromHome": 0,
            "workFromOffice": 0,
            "totalHours": 0.0,
            "overtimeHours": 0.0,
            "validWorkDay": 0,
            "leaveType": None,
        }
    worked = record.sign_in_time is not None
    return {
        "date": day.isoformat(),
        "present": int(record.presence == PresenceStatus.PRESENT),
        "absent": int(record.presence == PresenceStatus.ABSENT),
        "halfDay": int(record.half_day),
        "workFromHome": int(worked and record.work_location == WorkLocation.HOME),
        "workFromOffice": int(worked and record.work_location == WorkLocation.OFFICE),
        "totalHours": record.total_hours_worked,
        "overtimeHours": effective_overtime(record),
        "validWorkDay": int(record.is_signed_out and is_valid_work_day(record)),
        "leaveType": record.leave_type.value if record.leave_type else None,
    }


class AttendanceReportService:
    """Per-employee attendance summary over working days (Mon-Fri).

    Days in the past without a record count as absent; future days are left
    out of the totals.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        companies: CompanyRepository,
    ):
        self._attendance = attendance
        self._employees = employees
        self._companies = companies

    def build_attendance_report(
        self,
        employee_id: int,
        *,
        start: DayLike,
        end: DayLike,
        now: Optional[datetime] = None,
    ) -> ReportData:
        now = ensure_aware(now or utc_now())
        start, end = parse_local_date(start), parse_local_date(end)

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        schedule = self._companies.get_by_id(employee.company_id)
        if not schedule:
            raise NotFoundError("Company not found")
        tz = schedule.tz

        records = self._attendance.list_for_employee(
            employee.employee_id,
            start=local_midnight_to_utc(start, tz),
            end=next_local_midnight_to_utc(end, tz),
        )
        by_day: Dict[date, AttendanceRecord] = {local_day_of(r.day_key, tz): r for r in records}

        today = local_day_of(now, tz)
        rows: list[dict] = []
        day = start
        while day <= min(end, today):
            if day.weekday() < 5 or day in by_day:
                rows.append(_row(day, by_day.get(day)))
            day += timedelta(days=1)

        return ReportData(rows=rows, summary=self._summarize(rows))

    @staticmethod
    def _summarize(rows: list[dict]) -> dict:
        total_days = len(rows)
        present = sum(r["present"] for r in rows)
        total_hours = round(sum(r["totalHours"] for r in rows), 2)

        office_hours = home_hours = 0.0
        for r in rows:
            if r["workFromOffice"]:
                office_hours += r["totalHours"]
            elif r["workFromHome"]:
                home_hours += r["totalHours"]

        return {
            "totalDays": total_days,
            "presentDays": present,
            "absentDays": sum(r["absent"] for r in rows),
            "halfDays": sum(r["halfDay"] for r in rows),
            "validWorkDays": sum(r["validWorkDay"] for r in rows),
            "workFromHome": sum(r["workFromHome"] for r in rows),
            "workFromOffice": sum(r["workFromOffice"] for r in rows),
            "totalHoursWorked": total_hours,
            "averageHoursPerDay": round(total_hours / total_days, 2) if total_days else 0,
            "overtimeHours": round(sum(r["overtimeHours"] for r in rows), 2),
            "attendanceRate": round(present / total_days * 100, 2) if total_days else 0,
            "totalOfficeHours": round(office_hours, 2),
            "totalHomeHours": round(home_hours, 2),
        }
