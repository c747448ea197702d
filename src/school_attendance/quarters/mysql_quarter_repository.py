from __future__ import annotations

from datetime import date, time
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import Quarter
from .repository import QuarterRepository


class MySQLQuarterRepository(QuarterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, day: date) -> Optional[Quarter]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, quarter_name, start_date, end_date, school_start_time
                FROM quarters
                WHERE start_date <= %s AND end_date >= %s AND deleted_at IS NULL
                ORDER BY start_date DESC
                LIMIT 2
                """,
                (day, day),
            )
            rows = fetchall(cur)
            if not rows:
                return None
            if len(rows) > 1:
                raise RuntimeError(f"Overlapping quarters found for {day.isoformat()}")
            r = rows[0]
            return Quarter(
                id=int(r["id"]),
                quarter_name=r["quarter_name"],
                start_date=r["start_date"],
                end_date=r["end_date"],
                school_start_time=normalize_mysql_time(r["school_start_time"]),
            )

    def update_school_start_time(self, quarter_id: int, school_start_time: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE quarters SET school_start_time=%s WHERE id=%s AND deleted_at IS NULL",
                (school_start_time, int(quarter_id)),
            )
            return cur.rowcount > 0
