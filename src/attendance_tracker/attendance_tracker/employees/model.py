from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): nhân viên.

    Only the fields the attendance core reads. ``half_days_per_month=None``
    means half-days are not capped.
    """

    employee_id: int
    company_id: int
    full_name: str
    email: str
    sick_days_per_month: int = 7
    half_days_per_month: Optional[int] = None
    is_active: bool = True
