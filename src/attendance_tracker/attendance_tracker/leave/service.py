from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.clock import local_midnight_to_utc, month_bounds, month_period
from ..core.enums import LeaveKind, LeaveType
from ..core.exceptions import NotFoundError, QuotaExceededError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import LeaveBalance, LeaveCounter
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def remaining(allowance: Optional[int], taken: int) -> Optional[int]:
    """Allowance minus taken, floored at 0; None allowance means no cap."""
    if allowance is None:
        return None
    return max(0, int(allowance) - int(taken))


class LeaveService:
    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository, attendance: AttendanceRepository):
        self._leaves = leaves
        self._employees = employees
        self._attendance = attendance

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    @staticmethod
    def _allowance(employee: Employee, kind: LeaveKind) -> Optional[int]:
        if kind == LeaveKind.SICK:
            return int(employee.sick_days_per_month)
        return employee.half_days_per_month

    def balance(self, employee_id: int, day: date) -> LeaveBalance:
        employee = self._employee(employee_id)
        period = month_period(day)
        counter = self._leaves.get(employee.employee_id, period) or LeaveCounter(employee.employee_id, period)

        sick_allowance = self._allowance(employee, LeaveKind.SICK)
        half_allowance = self._allowance(employee, LeaveKind.HALF_DAY)
        return LeaveBalance(
            employee_id=employee.employee_id,
            period=period,
            sick_allowance=sick_allowance,
            sick_taken=counter.sick_leaves,
            sick_remaining=remaining(sick_allowance, counter.sick_leaves),
            half_day_allowance=half_allowance,
            half_day_taken=counter.half_day_leaves,
            half_day_remaining=remaining(half_allowance, counter.half_day_leaves),
        )

    def reserve(self, employee_id: int, kind: LeaveKind, day: date) -> None:
        """Consume one unit of this month's allowance or raise QuotaExceededError."""
        employee = self._employee(employee_id)
        period = month_period(day)
        limit = self._allowance(employee, kind)
        if not self._leaves.try_increment(employee.employee_id, period, kind, limit=limit):
            label = "sick leave" if kind == LeaveKind.SICK else "half days"
            raise QuotaExceededError(f"No {label} remaining for {period}")
        logger.info("Reserved %s quota for employee %s (%s)", kind.value, employee.employee_id, period)

    def release(self, employee_id: int, kind: LeaveKind, day: date) -> None:
        period = month_period(day)
        if not self._leaves.decrement(int(employee_id), period, kind):
            logger.warning("Nothing to release for employee %s %s (%s)", employee_id, kind.value, period)

    def rebuild(self, employee_id: int, day: date, tz: tzinfo) -> LeaveCounter:
        """Recount the month's counters from attendance records (the source of truth)."""
        first, next_first = month_bounds(day)
        records = self._attendance.list_for_employee(
            int(employee_id),
            start=local_midnight_to_utc(first, tz),
            end=local_midnight_to_utc(next_first, tz),
        )
        sick = sum(1 for r in records if r.leave_type == LeaveType.SICK)
        half = sum(1 for r in records if r.half_day)

        period = month_period(day)
        self._leaves.set_counts(int(employee_id), period, sick_leaves=sick, half_day_leaves=half)
        logger.info("Rebuilt leave counters for employee %s (%s): sick=%s half=%s", employee_id, period, sick, half)
        return LeaveCounter(employee_id=int(employee_id), period=period, sick_leaves=sick, half_day_leaves=half)
