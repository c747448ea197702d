from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchone
from .model import LateMinutesUpdate, LateTally, QuarterLateTracking
from .repository import LateTrackingRepository


def apply_late_minutes(cur, update: LateMinutesUpdate) -> LateTally:
    """Ensure the row, lock it, update it, on the caller's open transaction.

    Concurrent scans for the same (student, quarter) queue on the row lock.
    """
    key = (int(update.student_id), int(update.quarter_id))
    cur.execute(
        """
        INSERT INTO quarter_late_tracking(student_id, quarter_id, total_late_minutes, notification_sent)
        VALUES(%s, %s, 0, 0)
        ON DUPLICATE KEY UPDATE student_id=student_id
        """,
        key,
    )
    cur.execute(
        """
        SELECT total_late_minutes, notification_sent
        FROM quarter_late_tracking
        WHERE student_id=%s AND quarter_id=%s
        FOR UPDATE
        """,
        key,
    )
    before = fetchone(cur)
    was_notified = as_bool(before["notification_sent"])
    total = int(before["total_late_minutes"]) + int(update.minutes)
    crossed = total >= int(update.threshold) and not was_notified

    cur.execute(
        """
        UPDATE quarter_late_tracking
        SET total_late_minutes=%s, notification_sent=%s, last_updated=UTC_TIMESTAMP()
        WHERE student_id=%s AND quarter_id=%s
        """,
        (total, int(was_notified or crossed), *key),
    )
    return LateTally(total_minutes=total, crossed_threshold=crossed, notification_sent=was_notified or crossed)


class MySQLLateTrackingRepository(LateTrackingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add_late_minutes(self, *, student_id: int, quarter_id: int, minutes: int, threshold: int) -> LateTally:
        update = LateMinutesUpdate(student_id=student_id, quarter_id=quarter_id, minutes=minutes, threshold=threshold)
        with db_cursor(self._conn_factory) as (_, cur):
            return apply_late_minutes(cur, update)

    def get(self, *, student_id: int, quarter_id: int) -> Optional[QuarterLateTracking]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, quarter_id, total_late_minutes, notification_sent
                FROM quarter_late_tracking
                WHERE student_id=%s AND quarter_id=%s
                """,
                (int(student_id), int(quarter_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return QuarterLateTracking(
                student_id=int(r["student_id"]),
                quarter_id=int(r["quarter_id"]),
                total_late_minutes=int(r["total_late_minutes"]),
                notification_sent=as_bool(r["notification_sent"]),
            )
