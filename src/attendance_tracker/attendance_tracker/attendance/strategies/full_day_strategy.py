from __future__ import annotations

from datetime import datetime

from ...companies.model import CompanySchedule
from ..model import AttendanceRecord
from .base import ClosingStrategy


class FullDayClosingStrategy(ClosingStrategy):
    """Close at the company's end time on the day of sign-in."""

    def close_at(self, *, record: AttendanceRecord, schedule: CompanySchedule) -> datetime:
        deadline = self.end_of_day(self.work_day(record, schedule), schedule)
        return self.not_before_sign_in(deadline, record)
