from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Tuple

from ..common.clock import (
    DayLike,
    ensure_aware,
    local_day_of,
    local_midnight_to_utc,
    local_time_to_utc,
    next_local_midnight_to_utc,
    parse_local_date,
    utc_now,
)
from ..common.validators import require_overtime_hours
from ..companies.model import CompanySchedule
from ..companies.repository import CompanyRepository
from ..core.constants import CAS_ATTEMPTS, HALF_DAY_HOURS, SIGN_IN_GRACE_MINUTES
from ..core.enums import LeaveKind, LeaveType, WorkLocation
from ..core.exceptions import ConcurrentUpdateError, InvalidInputError, NotFoundError, StorageError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leave.service import LeaveService
from . import state_machine
from .factory import ClosingStrategyFactory
from .model import AttendanceRecord, AttendanceStatusView
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

Transition = Callable[[Optional[AttendanceRecord]], Optional[AttendanceRecord]]


class AttendanceService:
    """Runs state-machine transitions against the persisted day record.

    Each command reads the record, lets :mod:`state_machine` decide, and
    writes back with a conditional insert/replace. Lost races are retried
    from a fresh read, so a transition is always validated against what is
    actually stored.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        companies: CompanyRepository,
        leave: LeaveService,
        *,
        strategy_factory: Optional[ClosingStrategyFactory] = None,
        grace_minutes: int = SIGN_IN_GRACE_MINUTES,
        cas_attempts: int = CAS_ATTEMPTS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._companies = companies
        self._leave = leave
        self._strategy_factory = strategy_factory or ClosingStrategyFactory()
        self._grace_minutes = int(grace_minutes)
        self._cas_attempts = max(1, int(cas_attempts))

    # ----- helpers -----

    def _context(self, employee_id: int) -> Tuple[Employee, CompanySchedule]:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        schedule = self._companies.get_by_id(employee.company_id)
        if not schedule:
            raise NotFoundError("Company not found")
        return employee, schedule

    @staticmethod
    def _day(schedule: CompanySchedule, day: Optional[DayLike], now: datetime) -> Tuple[date, datetime]:
        local_day = parse_local_date(day) if day is not None else local_day_of(now, schedule.tz)
        return local_day, local_midnight_to_utc(local_day, schedule.tz)

    def _scheduled_close(
        self,
        current: Optional[AttendanceRecord],
        schedule: CompanySchedule,
        now: datetime,
    ) -> Optional[datetime]:
        """Where the reconciler would close this session, capped at ``now``."""
        if current is None or current.sign_in_time is None:
            return None
        if schedule.end_time is not None:
            closes_at = self._strategy_factory.for_record(current).close_at(record=current, schedule=schedule)
        elif current.half_day:
            closes_at = current.sign_in_time + timedelta(hours=HALF_DAY_HOURS)
        else:
            closes_at = next_local_midnight_to_utc(local_day_of(current.sign_in_time, schedule.tz), schedule.tz)
        return max(current.sign_in_time, min(closes_at, now))

    def _apply(
        self,
        employee_id: int,
        day_key: datetime,
        transition: Transition,
    ) -> Tuple[Optional[AttendanceRecord], Optional[AttendanceRecord]]:
        """Read -> transition -> conditional write; returns (before, stored)."""
        for attempt in range(1, self._cas_attempts + 1):
            current = self._attendance.get_for_employee_and_day(employee_id, day_key)
            updated = transition(current)
            if updated is None:
                return current, current

            if current is None:
                stored = self._attendance.insert(updated)
            else:
                stored = self._attendance.replace(updated, expected_version=current.version)
            if stored is not None:
                return current, stored

            logger.info(
                "Attendance record for employee %s at %s changed concurrently (attempt %s/%s)",
                employee_id,
                day_key.isoformat(),
                attempt,
                self._cas_attempts,
            )
        raise ConcurrentUpdateError("Attendance record changed concurrently, please retry")

    def _apply_with_quota(
        self,
        employee_id: int,
        kind: LeaveKind,
        local_day: date,
        day_key: datetime,
        transition: Transition,
        consumed: Callable[[Optional[AttendanceRecord], AttendanceRecord], bool],
    ) -> AttendanceRecord:
        # Reserve first so the quota can never be overdrawn; give it back if
        # the record write fails or turns out not to need it.
        self._leave.reserve(employee_id, kind, local_day)
        try:
            before, stored = self._apply(employee_id, day_key, transition)
        except Exception:
            try:
                self._leave.release(employee_id, kind, local_day)
            except StorageError:
                logger.exception("Could not release %s quota for employee %s", kind.value, employee_id)
            raise
        if stored is None or not consumed(before, stored):
            self._leave.release(employee_id, kind, local_day)
        return stored

    # ----- queries -----

    def get_record(self, employee_id: int, *, day: Optional[DayLike] = None, now: Optional[datetime] = None):
        now = ensure_aware(now or utc_now())
        _, schedule = self._context(employee_id)
        _, day_key = self._day(schedule, day, now)
        return self._attendance.get_for_employee_and_day(int(employee_id), day_key)

    def get_status(
        self,
        employee_id: int,
        *,
        day: Optional[DayLike] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceStatusView:
        return state_machine.status_view(self.get_record(employee_id, day=day, now=now))

    def get_overtime(self, employee_id: int, *, day: Optional[DayLike] = None, now: Optional[datetime] = None) -> float:
        record = self.get_record(employee_id, day=day, now=now)
        if not record:
            raise NotFoundError("Attendance not found for this date")
        return record.overtime_hours

    # ----- commands -----

    def sign_in(
        self,
        employee_id: int,
        *,
        location: WorkLocation = WorkLocation.OFFICE,
        is_half_day: bool = False,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        local_day, day_key = self._day(schedule, None, now)

        def transition(current):
            return state_machine.sign_in(
                current,
                employee_id=employee.employee_id,
                day_key=day_key,
                now=now,
                location=location,
                is_half_day=is_half_day,
            )

        # Record state first: a repeated sign-in is a conflict at any hour.
        current = self._attendance.get_for_employee_and_day(employee.employee_id, day_key)
        transition(current)

        opens_at = local_time_to_utc(local_day, schedule.start_time, schedule.tz) - timedelta(minutes=self._grace_minutes)
        closes_at = (
            local_time_to_utc(local_day, schedule.end_time, schedule.tz)
            if schedule.end_time
            else next_local_midnight_to_utc(local_day, schedule.tz)
        )
        state_machine.check_sign_in_window(now, opens_at=opens_at, closes_at=closes_at)

        if is_half_day and not (current and current.half_day):
            stored = self._apply_with_quota(
                employee.employee_id,
                LeaveKind.HALF_DAY,
                local_day,
                day_key,
                transition,
                consumed=lambda before, after: after.half_day and not (before and before.half_day),
            )
        else:
            _, stored = self._apply(employee.employee_id, day_key, transition)

        logger.info("Employee %s signed in at %s (%s)", employee.employee_id, now.isoformat(), location.value)
        return stored

    def sign_out(
        self,
        employee_id: int,
        *,
        at: Optional[datetime] = None,
        hours_hint: Optional[float] = None,
        automatic: bool = False,
        day: Optional[DayLike] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Close the day's session; ``at`` is the client-reported time, if any.

        Without ``at``, an automatic sign-out and a sign-out for an earlier
        day close where the reconciler would (company end, or the midpoint on
        half-days), never later than ``now``. The stored total is always
        recomputed here; ``hours_hint`` is only compared against it and
        logged when the two disagree.
        """
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        local_day, day_key = self._day(schedule, day, now)
        past_day = local_day < local_day_of(now, schedule.tz)

        if at is not None:
            at = ensure_aware(at)
            if at > now:
                raise InvalidInputError("Sign-out time cannot be in the future")

        def transition(current):
            sign_out_at = at
            if sign_out_at is None:
                sign_out_at = self._scheduled_close(current, schedule, now) if automatic or past_day else now
            return state_machine.sign_out(current, at=sign_out_at, lunch_duration_minutes=schedule.lunch_minutes)

        _, stored = self._apply(employee.employee_id, day_key, transition)

        if hours_hint is not None and abs(float(hours_hint) - stored.total_hours_worked) >= 0.01:
            logger.warning(
                "Client hours %.2f differ from computed %.2f for employee %s; keeping computed value",
                float(hours_hint),
                stored.total_hours_worked,
                employee.employee_id,
            )
        logger.info(
            "Employee %s %ssigned out at %s, hours=%.2f",
            employee.employee_id,
            "auto-" if automatic else "",
            stored.sign_out_time.isoformat(),
            stored.total_hours_worked,
        )
        return stored

    def auto_sign_out(self, employee_id: int, **kwargs) -> AttendanceRecord:
        return self.sign_out(employee_id, automatic=True, **kwargs)

    def request_leave(
        self,
        employee_id: int,
        *,
        day: DayLike,
        leave_type: LeaveType = LeaveType.SICK,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        local_day, day_key = self._day(schedule, day, now)
        if local_day < local_day_of(now, schedule.tz):
            raise InvalidInputError("Leave can only be requested for today or a future date")

        def transition(current):
            return state_machine.request_leave(
                current,
                employee_id=employee.employee_id,
                day_key=day_key,
                leave_type=leave_type,
            )

        # Validate before touching the quota.
        transition(self._attendance.get_for_employee_and_day(employee.employee_id, day_key))

        if leave_type == LeaveType.SICK:
            stored = self._apply_with_quota(
                employee.employee_id,
                LeaveKind.SICK,
                local_day,
                day_key,
                transition,
                consumed=lambda before, after: after.leave_type == LeaveType.SICK,
            )
        else:
            _, stored = self._apply(employee.employee_id, day_key, transition)

        logger.info("Employee %s on %s leave for %s", employee.employee_id, leave_type.value, local_day.isoformat())
        return stored

    def mark_absent(self, employee_id: int, *, day: DayLike, now: Optional[datetime] = None) -> AttendanceRecord:
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        _, day_key = self._day(schedule, day, now)

        _, stored = self._apply(
            employee.employee_id,
            day_key,
            lambda current: state_machine.mark_absent(current, employee_id=employee.employee_id, day_key=day_key),
        )
        return stored

    def request_half_day(self, employee_id: int, *, day: DayLike, now: Optional[datetime] = None) -> AttendanceRecord:
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        local_day, day_key = self._day(schedule, day, now)
        today = local_day_of(now, schedule.tz)
        if local_day < today:
            raise InvalidInputError("Half days can only be requested for today or a future date")

        def transition(current):
            return state_machine.request_half_day(
                current,
                employee_id=employee.employee_id,
                day_key=day_key,
                is_today=local_day == today,
            )

        transition(self._attendance.get_for_employee_and_day(employee.employee_id, day_key))
        stored = self._apply_with_quota(
            employee.employee_id,
            LeaveKind.HALF_DAY,
            local_day,
            day_key,
            transition,
            consumed=lambda before, after: after.half_day and not (before and before.half_day),
        )
        logger.info("Employee %s requested a half day for %s", employee.employee_id, local_day.isoformat())
        return stored

    def start_lunch_break(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        _, day_key = self._day(schedule, None, now)

        _, stored = self._apply(
            employee.employee_id,
            day_key,
            lambda current: state_machine.start_lunch_break(current, now=now, accept_lunch=schedule.accept_lunch),
        )
        return stored

    def end_lunch_break(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        _, day_key = self._day(schedule, None, now)

        _, stored = self._apply(
            employee.employee_id,
            day_key,
            lambda current: state_machine.end_lunch_break(current, now=now),
        )
        return stored

    def submit_overtime(
        self,
        employee_id: int,
        *,
        hours,
        day: Optional[DayLike] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        hours = require_overtime_hours(hours)
        now = ensure_aware(now or utc_now())
        employee, schedule = self._context(employee_id)
        _, day_key = self._day(schedule, day, now)

        _, stored = self._apply(
            employee.employee_id,
            day_key,
            lambda current: state_machine.submit_overtime(current, hours=hours),
        )
        logger.info("Employee %s submitted %.2f overtime hours", employee.employee_id, hours)
        return stored
