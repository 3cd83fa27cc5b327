from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime

from ...common.clock import local_day_of, local_time_to_utc
from ...companies.model import CompanySchedule
from ...core.exceptions import InvalidInputError
from ..model import AttendanceRecord


class ClosingStrategy(ABC):
    """Strategy Pattern: decide when a forgotten session is closed."""

    @abstractmethod
    def close_at(self, *, record: AttendanceRecord, schedule: CompanySchedule) -> datetime:
        raise NotImplementedError

    @staticmethod
    def work_day(record: AttendanceRecord, schedule: CompanySchedule) -> date:
        return local_day_of(record.sign_in_time or record.day_key, schedule.tz)

    @staticmethod
    def end_of_day(day: date, schedule: CompanySchedule) -> datetime:
        if schedule.end_time is None:
            raise InvalidInputError(f"Company {schedule.company_id} has no end time")
        return local_time_to_utc(day, schedule.end_time, schedule.tz)

    @staticmethod
    def not_before_sign_in(instant: datetime, record: AttendanceRecord) -> datetime:
        if record.sign_in_time is not None and instant < record.sign_in_time:
            return record.sign_in_time
        return instant
