from __future__ import annotations

from dataclasses import dataclass

from .model import AttendanceRecord
from .strategies.base import ClosingStrategy
from .strategies.full_day_strategy import FullDayClosingStrategy
from .strategies.half_day_strategy import HalfDayClosingStrategy


@dataclass
class ClosingStrategyFactory:
    """Factory Pattern: choose the closing rule for an open session."""

    def for_record(self, record: AttendanceRecord) -> ClosingStrategy:
        if record.half_day:
            return HalfDayClosingStrategy()
        return FullDayClosingStrategy()
