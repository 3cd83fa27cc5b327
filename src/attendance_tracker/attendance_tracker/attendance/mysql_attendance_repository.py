from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence

import mysql.connector

from ..core.enums import LeaveType, PresenceStatus, WorkLocation
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, is_duplicate_key, to_db_datetime
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, employee_id, day_key, sign_in_time, sign_out_time, work_location,
    lunch_break_start, lunch_break_end, lunch_break_taken, presence, half_day,
    leave_type, overtime_hours, total_hours_worked, version
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        day_key=from_db_datetime(r["day_key"]),
        sign_in_time=from_db_datetime(r.get("sign_in_time")),
        sign_out_time=from_db_datetime(r.get("sign_out_time")),
        work_location=WorkLocation(r["work_location"]),
        lunch_break_start=from_db_datetime(r.get("lunch_break_start")),
        lunch_break_end=from_db_datetime(r.get("lunch_break_end")),
        lunch_break_taken=bool(r.get("lunch_break_taken")),
        presence=PresenceStatus(r["presence"]),
        half_day=bool(r.get("half_day")),
        leave_type=LeaveType(r["leave_type"]) if r.get("leave_type") else None,
        overtime_hours=float(r.get("overtime_hours") or 0),
        total_hours_worked=float(r.get("total_hours_worked") or 0),
        version=int(r.get("version") or 0),
    )


def _mutable_values(record: AttendanceRecord) -> tuple:
    return (
        to_db_datetime(record.sign_in_time),
        to_db_datetime(record.sign_out_time),
        record.work_location.value,
        to_db_datetime(record.lunch_break_start),
        to_db_datetime(record.lunch_break_end),
        int(record.lunch_break_taken),
        record.presence.value,
        int(record.half_day),
        record.leave_type.value if record.leave_type else None,
        record.overtime_hours,
        record.total_hours_worked,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_day(self, employee_id: int, day_key: datetime) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND day_key=%s
                """,
                (int(employee_id), to_db_datetime(day_key)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, day_key, sign_in_time, sign_out_time, work_location,
                        lunch_break_start, lunch_break_end, lunch_break_taken, presence, half_day,
                        leave_type, overtime_hours, total_hours_worked, version
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                    """,
                    (int(record.employee_id), to_db_datetime(record.day_key)) + _mutable_values(record),
                )
            except mysql.connector.IntegrityError as exc:
                if is_duplicate_key(exc):
                    return None
                raise
            return dataclasses.replace(record, record_id=int(cur.lastrowid), version=1)

    def replace(self, record: AttendanceRecord, *, expected_version: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET sign_in_time=%s, sign_out_time=%s, work_location=%s,
                    lunch_break_start=%s, lunch_break_end=%s, lunch_break_taken=%s,
                    presence=%s, half_day=%s, leave_type=%s,
                    overtime_hours=%s, total_hours_worked=%s,
                    version=version + 1
                WHERE employee_id=%s AND day_key=%s AND version=%s
                """,
                _mutable_values(record)
                + (int(record.employee_id), to_db_datetime(record.day_key), int(expected_version)),
            )
            if cur.rowcount == 0:
                return None
            return dataclasses.replace(record, version=int(expected_version) + 1)

    def list_open_sessions(
        self,
        employee_ids: Iterable[int],
        *,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id IN ({placeholders})
                  AND day_key >= %s AND day_key < %s
                  AND sign_in_time IS NOT NULL
                  AND sign_out_time IS NULL
                ORDER BY day_key, employee_id
                """,
                tuple(ids) + (to_db_datetime(start), to_db_datetime(end)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: int, *, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND day_key >= %s AND day_key < %s
                ORDER BY day_key ASC
                """,
                (int(employee_id), to_db_datetime(start), to_db_datetime(end)),
            )
            return [_to_record(r) for r in fetchall(cur)]
