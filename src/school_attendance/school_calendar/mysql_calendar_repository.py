from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import CalendarDayKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import CalendarException
from .repository import CalendarRepository


def _to_exception(r: dict) -> CalendarException:
    return CalendarException(
        calendar_date=r["calendar_date"],
        is_school_day=as_bool(r["is_school_day"]),
        kind=CalendarDayKind(r["kind"]),
        title=r.get("title") or "",
    )


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, calendar_date: date) -> Optional[CalendarException]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT calendar_date, is_school_day, kind, title FROM school_calendar WHERE calendar_date=%s",
                (calendar_date,),
            )
            r = fetchone(cur)
            return _to_exception(r) if r else None

    def list_between(self, start_date: date, end_date: date) -> Sequence[CalendarException]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT calendar_date, is_school_day, kind, title
                FROM school_calendar
                WHERE calendar_date BETWEEN %s AND %s
                ORDER BY calendar_date
                """,
                (start_date, end_date),
            )
            return [_to_exception(r) for r in fetchall(cur)]
