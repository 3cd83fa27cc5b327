from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """One record per (employee, day_key), enforced by the store.

    Writes are conditional so that read -> decide -> write sequences never
    lose an update: ``insert`` fails on an existing key and ``replace`` only
    applies when the stored version still matches.
    """

    def get_for_employee_and_day(self, employee_id: int, day_key: datetime) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        """Create the day's record; None if one already exists for the key."""

        raise NotImplementedError

    def replace(self, record: AttendanceRecord, *, expected_version: int) -> Optional[AttendanceRecord]:
        """Overwrite the stored record if its version is still ``expected_version``.

        Returns the stored record (with the bumped version) or None when the
        record changed or vanished in the meantime.
        """

        raise NotImplementedError

    def list_open_sessions(
        self,
        employee_ids: Iterable[int],
        *,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        """Signed in, not signed out, with ``start <= day_key < end``."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        """Records with ``start <= day_key < end``, oldest first."""

        raise NotImplementedError
