from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LeaveCounter:
    """Số ngày nghỉ đã dùng trong một tháng (cache, có thể tính lại từ bản ghi chấm công)."""

    employee_id: int
    period: str
    sick_leaves: int = 0
    half_day_leaves: int = 0


@dataclass(frozen=True)
class LeaveBalance:
    employee_id: int
    period: str
    sick_allowance: int
    sick_taken: int
    sick_remaining: int
    half_day_allowance: Optional[int]
    half_day_taken: int
    half_day_remaining: Optional[int]

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "sickLeaves": self.sick_taken,
            "halfDayLeaves": self.half_day_taken,
            "sickDaysPerMonth": self.sick_allowance,
            "halfDaysPerMonth": self.half_day_allowance,
            "sickRemaining": self.sick_remaining,
            "halfDayRemaining": self.half_day_remaining,
        }
