"""In-memory repositories shared by the service, reconciler and controller tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord
from src.attendance_tracker.attendance_tracker.companies.model import CompanySchedule
from src.attendance_tracker.attendance_tracker.core.enums import LeaveKind
from src.attendance_tracker.attendance_tracker.employees.model import Employee
from src.attendance_tracker.attendance_tracker.leave.model import LeaveCounter


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def demo_company(**overrides) -> CompanySchedule:
    values = dict(
        company_id=1,
        company_name="Acme",
        start_time="09:00",
        end_time="18:00",
        accept_lunch=True,
        lunch_start_time="13:00",
        lunch_duration_minutes=30,
        utc_offset="+05:30",
    )
    values.update(overrides)
    return CompanySchedule.from_strings(**values)


class FakeAttendanceRepo:
    def __init__(self):
        self.rows: dict[tuple[int, datetime], AttendanceRecord] = {}
        self._next_id = 1
        self.inserts = 0
        self.replaces = 0
        # Called right before a write lands; lets a test simulate a concurrent writer.
        self.before_write: Optional[Callable[["FakeAttendanceRepo"], None]] = None

    def put(self, record: AttendanceRecord) -> AttendanceRecord:
        stored = replace(record, record_id=record.record_id or self._next_id, version=max(1, record.version))
        self._next_id += 1
        self.rows[(stored.employee_id, stored.day_key)] = stored
        return stored

    def _hook(self) -> None:
        if self.before_write:
            hook, self.before_write = self.before_write, None
            hook(self)

    def get_for_employee_and_day(self, employee_id, day_key):
        return self.rows.get((int(employee_id), day_key))

    def insert(self, record):
        self._hook()
        key = (record.employee_id, record.day_key)
        if key in self.rows:
            return None
        self.inserts += 1
        return self.put(replace(record, version=1))

    def replace(self, record, *, expected_version):
        self._hook()
        key = (record.employee_id, record.day_key)
        current = self.rows.get(key)
        if current is None or current.version != expected_version:
            return None
        self.replaces += 1
        stored = replace(record, record_id=current.record_id, version=expected_version + 1)
        self.rows[key] = stored
        return stored

    def list_open_sessions(self, employee_ids, *, start, end):
        ids = set(int(i) for i in employee_ids)
        return sorted(
            (
                r
                for r in self.rows.values()
                if r.employee_id in ids
                and start <= r.day_key < end
                and r.sign_in_time is not None
                and r.sign_out_time is None
            ),
            key=lambda r: (r.day_key, r.employee_id),
        )

    def list_for_employee(self, employee_id, *, start, end):
        return sorted(
            (r for r in self.rows.values() if r.employee_id == int(employee_id) and start <= r.day_key < end),
            key=lambda r: r.day_key,
        )


class FakeEmployeeRepo:
    def __init__(self, *employees: Employee):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def list_by_company(self, company_id):
        return [e for e in self._by_id.values() if e.company_id == int(company_id) and e.is_active]


class FakeCompanyRepo:
    def __init__(self, *companies: CompanySchedule):
        self._by_id = {c.company_id: c for c in companies}

    def get_by_id(self, company_id):
        return self._by_id.get(int(company_id))

    def list_with_end_time(self):
        return [c for c in self._by_id.values() if c.end_time is not None]


class FakeLeaveRepo:
    def __init__(self):
        self.counters: dict[tuple[int, str], LeaveCounter] = {}

    def get(self, employee_id, period):
        return self.counters.get((int(employee_id), period))

    def _field(self, kind):
        return "sick_leaves" if kind == LeaveKind.SICK else "half_day_leaves"

    def try_increment(self, employee_id, period, kind, *, limit):
        key = (int(employee_id), period)
        counter = self.counters.get(key) or LeaveCounter(int(employee_id), period)
        field = self._field(kind)
        if limit is not None and getattr(counter, field) >= limit:
            self.counters[key] = counter
            return False
        self.counters[key] = replace(counter, **{field: getattr(counter, field) + 1})
        return True

    def decrement(self, employee_id, period, kind):
        key = (int(employee_id), period)
        counter = self.counters.get(key)
        field = self._field(kind)
        if not counter or getattr(counter, field) <= 0:
            return False
        self.counters[key] = replace(counter, **{field: getattr(counter, field) - 1})
        return True

    def set_counts(self, employee_id, period, *, sick_leaves, half_day_leaves):
        self.counters[(int(employee_id), period)] = LeaveCounter(
            int(employee_id), period, sick_leaves=sick_leaves, half_day_leaves=half_day_leaves
        )
