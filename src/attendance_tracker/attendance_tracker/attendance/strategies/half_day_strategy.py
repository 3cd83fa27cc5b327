from __future__ import annotations

from datetime import datetime

from ...common.clock import local_time_to_utc
from ...companies.model import CompanySchedule
from ..model import AttendanceRecord
from .base import ClosingStrategy


class HalfDayClosingStrategy(ClosingStrategy):
    """Close at the midpoint of the company's working window, not at "now"."""

    def close_at(self, *, record: AttendanceRecord, schedule: CompanySchedule) -> datetime:
        day = self.work_day(record, schedule)
        start = local_time_to_utc(day, schedule.start_time, schedule.tz)
        end = self.end_of_day(day, schedule)
        midpoint = start + (end - start) / 2
        return self.not_before_sign_in(midpoint, record)
