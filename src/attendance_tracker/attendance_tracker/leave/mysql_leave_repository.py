from __future__ import annotations

from typing import Optional

from ..core.enums import LeaveKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import LeaveCounter
from .repository import LeaveRepository

_COLUMN_BY_KIND = {
    LeaveKind.SICK: "sick_leaves",
    LeaveKind.HALF_DAY: "half_day_leaves",
}


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, period: str) -> Optional[LeaveCounter]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, period, sick_leaves, half_day_leaves
                FROM leave_quotas
                WHERE employee_id=%s AND period=%s
                """,
                (int(employee_id), period),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveCounter(
                employee_id=int(r["employee_id"]),
                period=r["period"],
                sick_leaves=int(r["sick_leaves"]),
                half_day_leaves=int(r["half_day_leaves"]),
            )

    def try_increment(self, employee_id: int, period: str, kind: LeaveKind, *, limit: Optional[int]) -> bool:
        col = _COLUMN_BY_KIND[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO leave_quotas(employee_id, period, sick_leaves, half_day_leaves)
                VALUES(%s, %s, 0, 0)
                """,
                (int(employee_id), period),
            )
            cur.execute(
                f"""
                UPDATE leave_quotas
                SET {col} = {col} + 1
                WHERE employee_id=%s AND period=%s AND (%s IS NULL OR {col} < %s)
                """,
                (int(employee_id), period, limit, limit),
            )
            return cur.rowcount > 0

    def decrement(self, employee_id: int, period: str, kind: LeaveKind) -> bool:
        col = _COLUMN_BY_KIND[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_quotas
                SET {col} = {col} - 1
                WHERE employee_id=%s AND period=%s AND {col} > 0
                """,
                (int(employee_id), period),
            )
            return cur.rowcount > 0

    def set_counts(self, employee_id: int, period: str, *, sick_leaves: int, half_day_leaves: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_quotas(employee_id, period, sick_leaves, half_day_leaves)
                VALUES(%s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE sick_leaves=VALUES(sick_leaves), half_day_leaves=VALUES(half_day_leaves)
                """,
                (int(employee_id), period, int(sick_leaves), int(half_day_leaves)),
            )
