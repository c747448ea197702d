from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Set, Tuple

import mysql.connector

from ..core.exceptions import DuplicateScanError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_time
from ..late_tracking.model import LateMinutesUpdate, LateTally
from ..late_tracking.mysql_late_tracking_repository import apply_late_minutes
from .model import AttendanceLog
from .repository import AttendanceRepository


def _to_log(r: dict) -> AttendanceLog:
    return AttendanceLog(
        id=int(r["id"]),
        student_id=int(r["student_id"]),
        attendance_date=r["attendance_date"],
        time_in=normalize_mysql_time(r.get("time_in")),
        time_out=normalize_mysql_time(r.get("time_out")),
        is_late=as_bool(r.get("is_late")),
        late_minutes=int(r.get("late_minutes") or 0),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, attendance_date, time_in, time_out, is_late, late_minutes
                FROM attendance_log
                WHERE student_id=%s AND attendance_date=%s AND deleted_at IS NULL
                """,
                (int(student_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_log(r) if r else None

    def create_time_in(
        self,
        *,
        student_id: int,
        attendance_date: date,
        time_in: time,
        is_late: bool,
        late_minutes: int,
        late: Optional[LateMinutesUpdate] = None,
    ) -> Tuple[AttendanceLog, Optional[LateTally]]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_log(student_id, attendance_date, time_in, is_late, late_minutes)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(student_id), attendance_date, time_in, int(bool(is_late)), int(late_minutes)),
                )
                log_id = int(cur.lastrowid)
                tally = apply_late_minutes(cur, late) if late is not None else None
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateScanError() from e
            raise

        log = AttendanceLog(
            id=log_id,
            student_id=int(student_id),
            attendance_date=attendance_date,
            time_in=time_in,
            is_late=bool(is_late),
            late_minutes=int(late_minutes),
        )
        return log, tally

    def update_time_in(
        self,
        *,
        log_id: int,
        time_in: time,
        is_late: bool,
        late_minutes: int,
        late: Optional[LateMinutesUpdate] = None,
    ) -> Optional[LateTally]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_log
                SET time_in=%s, is_late=%s, late_minutes=%s
                WHERE id=%s AND time_in IS NULL
                """,
                (time_in, int(bool(is_late)), int(late_minutes), int(log_id)),
            )
            if cur.rowcount == 0:
                raise DuplicateScanError()
            return apply_late_minutes(cur, late) if late is not None else None

    def set_time_out(self, *, log_id: int, time_out: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_log
                SET time_out=%s
                WHERE id=%s AND time_in IS NOT NULL AND time_out IS NULL
                """,
                (time_out, int(log_id)),
            )
            return cur.rowcount > 0

    def list_dates_with_time_in(self, student_id: int, dates: Iterable[date]) -> Set[date]:
        wanted = sorted(set(dates))
        if not wanted:
            return set()

        placeholders = ",".join(["%s"] * len(wanted))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_date
                FROM attendance_log
                WHERE student_id=%s AND time_in IS NOT NULL AND deleted_at IS NULL
                  AND attendance_date IN ({placeholders})
                """,
                (int(student_id), *wanted),
            )
            return {r["attendance_date"] for r in fetchall(cur)}
