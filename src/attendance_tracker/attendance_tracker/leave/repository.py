from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import LeaveKind
from .model import LeaveCounter


class LeaveRepository(Protocol):
    """Per-employee monthly leave counters."""

    def get(self, employee_id: int, period: str) -> Optional[LeaveCounter]:
        raise NotImplementedError

    def try_increment(self, employee_id: int, period: str, kind: LeaveKind, *, limit: Optional[int]) -> bool:
        """Atomically add one if the counter is below ``limit`` (None = no cap)."""

        raise NotImplementedError

    def decrement(self, employee_id: int, period: str, kind: LeaveKind) -> bool:
        raise NotImplementedError

    def set_counts(self, employee_id: int, period: str, *, sick_leaves: int, half_day_leaves: int) -> None:
        raise NotImplementedError
