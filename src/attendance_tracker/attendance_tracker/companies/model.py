from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time, tzinfo
from typing import Optional

from ..common.clock import parse_hhmm, parse_utc_offset
from ..core.constants import ALLOWED_LUNCH_DURATIONS, DEFAULT_UTC_OFFSET
from ..core.exceptions import InvalidInputError


@dataclass(frozen=True)
class CompanySchedule:
    """Thực thể miền (domain): giờ làm việc của công ty.

    Read-only input to the attendance core; times are local wall-clock times
    in the company's fixed ``utc_offset``.
    """

    company_id: int
    company_name: str
    start_time: time
    end_time: Optional[time]
    accept_lunch: bool = False
    lunch_start_time: Optional[time] = None
    lunch_duration_minutes: Optional[int] = None
    utc_offset: str = DEFAULT_UTC_OFFSET
    tz: tzinfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tz", parse_utc_offset(self.utc_offset))

    @property
    def lunch_minutes(self) -> int:
        """Lunch minutes to deduct from worked time; 0 when lunch is not offered."""
        if not self.accept_lunch or not self.lunch_duration_minutes:
            return 0
        return int(self.lunch_duration_minutes)

    @classmethod
    def from_strings(
        cls,
        *,
        company_id: int,
        company_name: str,
        start_time: str = "09:00",
        end_time: Optional[str] = "18:00",
        accept_lunch: bool = False,
        lunch_start_time: Optional[str] = None,
        lunch_duration_minutes: Optional[int] = None,
        utc_offset: str = DEFAULT_UTC_OFFSET,
    ) -> "CompanySchedule":
        schedule = cls(
            company_id=int(company_id),
            company_name=company_name,
            start_time=parse_hhmm(start_time),
            end_time=parse_hhmm(end_time) if end_time else None,
            accept_lunch=bool(accept_lunch),
            lunch_start_time=parse_hhmm(lunch_start_time) if lunch_start_time else None,
            lunch_duration_minutes=int(lunch_duration_minutes) if lunch_duration_minutes else None,
            utc_offset=utc_offset,
        )
        schedule.validate()
        return schedule

    def validate(self) -> None:
        if self.end_time is not None and self.end_time <= self.start_time:
            raise InvalidInputError("end_time must be after start_time")
        if self.accept_lunch:
            if self.lunch_start_time is None:
                raise InvalidInputError("lunch_start_time is required when lunch is accepted")
            if self.lunch_duration_minutes not in ALLOWED_LUNCH_DURATIONS:
                raise InvalidInputError("lunch_duration_minutes must be 30 or 60")
