from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import DEFAULT_UTC_OFFSET
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import CompanySchedule
from .repository import CompanyRepository

_COLUMNS = """
    company_id, company_name, start_time, end_time, accept_lunch,
    lunch_start_time, lunch_duration_minutes, utc_offset
"""


def _to_schedule(r: Dict[str, Any], default_utc_offset: str) -> CompanySchedule:
    return CompanySchedule(
        company_id=int(r["company_id"]),
        company_name=r["company_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r.get("end_time")),
        accept_lunch=bool(r.get("accept_lunch")),
        lunch_start_time=normalize_mysql_time(r.get("lunch_start_time")),
        lunch_duration_minutes=int(r["lunch_duration_minutes"]) if r.get("lunch_duration_minutes") else None,
        utc_offset=r.get("utc_offset") or default_utc_offset,
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_utc_offset: str = DEFAULT_UTC_OFFSET):
        self._conn_factory = conn_factory
        self._default_utc_offset = default_utc_offset

    def get_by_id(self, company_id: int) -> Optional[CompanySchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE company_id=%s", (int(company_id),))
            r = fetchone(cur)
            return _to_schedule(r, self._default_utc_offset) if r else None

    def list_with_end_time(self) -> Sequence[CompanySchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM companies
                WHERE end_time IS NOT NULL
                ORDER BY company_id
                """
            )
            return [_to_schedule(r, self._default_utc_offset) for r in fetchall(cur)]
