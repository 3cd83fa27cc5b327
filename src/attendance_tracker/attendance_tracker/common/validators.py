from __future__ import annotations

from typing import Any

from ..core.constants import MAX_OVERTIME_HOURS
from ..core.enums import LeaveType
from ..core.exceptions import InvalidInputError


def require_overtime_hours(value: Any) -> float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError("Invalid hours")
    hours = float(value)
    if hours <= 0 or hours > MAX_OVERTIME_HOURS:
        raise InvalidInputError(f"Overtime must be between 0 and {MAX_OVERTIME_HOURS} hours")
    return hours


def optional_hours_hint(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInputError("Invalid hours")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInputError("Invalid hours")


def require_leave_type(value: Any) -> LeaveType:
    if value is None or value == "":
        return LeaveType.SICK
    try:
        return LeaveType(str(value).strip().lower())
    except ValueError:
        raise InvalidInputError(f"Unknown leave type: {value!r}")
