from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _to_employee(r: Dict[str, Any]) -> Employee:
    half_days = r.get("half_days_per_month")
    return Employee(
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        full_name=r["full_name"],
        email=r["email"],
        sick_days_per_month=int(r.get("sick_days_per_month") or 0),
        half_days_per_month=int(half_days) if half_days is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, company_id, full_name, email,
                       sick_days_per_month, half_days_per_month, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_by_company(self, company_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, company_id, full_name, email,
                       sick_days_per_month, half_days_per_month, is_active
                FROM employees
                WHERE company_id=%s AND is_active=1
                ORDER BY employee_id
                """,
                (int(company_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]
