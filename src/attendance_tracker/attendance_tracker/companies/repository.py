from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CompanySchedule


class CompanyRepository(Protocol):
    def get_by_id(self, company_id: int) -> Optional[CompanySchedule]:
        raise NotImplementedError

    def list_with_end_time(self) -> Sequence[CompanySchedule]:
        """Companies whose schedule defines an end time (auto sign-out candidates)."""

        raise NotImplementedError
