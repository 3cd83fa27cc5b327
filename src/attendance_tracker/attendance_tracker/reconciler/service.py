from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from ..attendance.accounting import close_session
from ..attendance.factory import ClosingStrategyFactory
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.clock import (
    ensure_aware,
    local_day_of,
    local_midnight_to_utc,
    local_time_to_utc,
    next_local_midnight_to_utc,
    utc_now,
)
from ..companies.model import CompanySchedule
from ..companies.repository import CompanyRepository
from ..core.constants import RECONCILE_LOOKBACK_DAYS, RECONCILE_RECORD_ATTEMPTS
from ..core.exceptions import ConcurrentUpdateError, StorageError
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    timestamp: datetime
    processed_companies: int = 0
    auto_signed_out_employees: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "processedCompanies": self.processed_companies,
            "autoSignedOutEmployees": self.auto_signed_out_employees,
            "errors": list(self.errors),
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
        }


class AutoSignOutReconciler:
    """Close sessions that were left open past the company's end time.

    Safe to run repeatedly: only records with a sign-in and no sign-out are
    ever picked up, and every close is a conditional write.
    """

    def __init__(
        self,
        companies: CompanyRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        strategy_factory: Optional[ClosingStrategyFactory] = None,
        lookback_days: int = RECONCILE_LOOKBACK_DAYS,
        record_attempts: int = RECONCILE_RECORD_ATTEMPTS,
    ):
        self._companies = companies
        self._employees = employees
        self._attendance = attendance
        self._strategy_factory = strategy_factory or ClosingStrategyFactory()
        self._lookback_days = max(0, int(lookback_days))
        self._record_attempts = max(1, int(record_attempts))

    def run(self, now: Optional[datetime] = None) -> ReconciliationReport:
        now = ensure_aware(now or utc_now())
        report = ReconciliationReport(timestamp=now)

        companies = self._companies.list_with_end_time()
        logger.info("Auto sign-out: processing %s companies", len(companies))

        for schedule in companies:
            report.processed_companies += 1
            try:
                self._reconcile_company(schedule, now, report)
            except Exception as exc:
                message = f"Failed to process company {schedule.company_name}: {exc}"
                logger.exception(message)
                report.errors.append(message)

        logger.info(
            "Auto sign-out finished: companies=%s signed_out=%s errors=%s",
            report.processed_companies,
            report.auto_signed_out_employees,
            len(report.errors),
        )
        return report

    def _reconcile_company(self, schedule: CompanySchedule, now: datetime, report: ReconciliationReport) -> None:
        today = local_day_of(now, schedule.tz)
        last_day = today
        if now <= local_time_to_utc(today, schedule.end_time, schedule.tz):
            last_day = today - timedelta(days=1)
        first_day = today - timedelta(days=self._lookback_days)
        if last_day < first_day:
            logger.debug("Skipping %s: not past end time yet", schedule.company_name)
            return

        employees = self._employees.list_by_company(schedule.company_id)
        if not employees:
            logger.debug("No employees for %s", schedule.company_name)
            return

        open_sessions = self._attendance.list_open_sessions(
            [e.employee_id for e in employees],
            start=local_midnight_to_utc(first_day, schedule.tz),
            end=next_local_midnight_to_utc(last_day, schedule.tz),
        )
        logger.info("%s open sessions to close for %s", len(open_sessions), schedule.company_name)

        for record in open_sessions:
            try:
                if self._close_record(record, schedule):
                    report.auto_signed_out_employees += 1
            except Exception as exc:
                message = f"Failed to auto sign-out employee {record.employee_id}: {exc}"
                logger.error(message)
                report.errors.append(message)

    def _close_record(self, record: AttendanceRecord, schedule: CompanySchedule) -> bool:
        """Close one open session; False when someone else already closed it."""
        current: Optional[AttendanceRecord] = record
        for attempt in range(1, self._record_attempts + 1):
            try:
                if attempt > 1:
                    current = self._attendance.get_for_employee_and_day(record.employee_id, record.day_key)
                if current is None or not current.is_signed_in:
                    return False

                strategy = self._strategy_factory.for_record(current)
                closed = close_session(
                    current,
                    strategy.close_at(record=current, schedule=schedule),
                    lunch_duration_minutes=schedule.lunch_minutes,
                )
                if self._attendance.replace(closed, expected_version=current.version) is not None:
                    logger.info(
                        "Auto signed-out employee %s at %s, hours=%.2f",
                        closed.employee_id,
                        closed.sign_out_time.isoformat(),
                        closed.total_hours_worked,
                    )
                    return True
            except StorageError as exc:
                if attempt == self._record_attempts:
                    raise
                logger.warning(
                    "Storage error closing employee %s (attempt %s/%s): %s",
                    record.employee_id,
                    attempt,
                    self._record_attempts,
                    exc,
                )

        # The version kept moving; one last look decides between "closed by someone else" and a real conflict.
        latest = self._attendance.get_for_employee_and_day(record.employee_id, record.day_key)
        if latest is None or not latest.is_signed_in:
            return False
        raise ConcurrentUpdateError("Attendance record changed concurrently")
