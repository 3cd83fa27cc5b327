from __future__ import annotations

from enum import Enum


class WorkLocation(str, Enum):
    """Nơi làm việc, chốt lúc sign-in."""

    HOME = "work_from_home"
    OFFICE = "work_from_office"

    @classmethod
    def from_client(cls, value: str | None) -> "WorkLocation":
        # Clients send the short codes "WFH" / "WFO" as well as the stored values.
        v = (value or "").strip()
        if v.upper() == "WFH" or v == cls.HOME.value:
            return cls.HOME
        return cls.OFFICE


class PresenceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class LeaveType(str, Enum):
    SICK = "sick"
    HALF = "half"
    OTHER = "other"


class LeaveKind(str, Enum):
    """Loại quota theo tháng."""

    SICK = "sick"
    HALF_DAY = "half"


class ActivityState(str, Enum):
    """Trạng thái hiển thị của một ngày, suy ra từ bản ghi."""

    IDLE = "idle"
    SIGNED_IN = "signed_in"
    ON_LUNCH_BREAK = "on_lunch_break"
    SIGNED_OUT = "signed_out"
    ABSENT_ON_LEAVE = "absent_on_leave"


class ErrorCode(str, Enum):
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    OUT_OF_WINDOW = "OUT_OF_WINDOW"
    INVALID_INPUT = "INVALID_INPUT"
    STORAGE_FAILURE = "STORAGE_FAILURE"
