from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import NotificationStatus, NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        student_id: int,
        teacher_id: int,
        type: NotificationType,
        message: str,
        sent_at: datetime,
    ) -> Notification:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(student_id, teacher_id, type, message, sent_at, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(teacher_id), type.value, message, sent_at, NotificationStatus.SENT.value),
            )
            return Notification(
                id=int(cur.lastrowid),
                student_id=int(student_id),
                teacher_id=int(teacher_id),
                type=type,
                message=message,
                sent_at=sent_at,
            )

    def list_for_teacher(self, teacher_id: int, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT n.id, n.student_id, n.teacher_id, n.type, n.message, n.sent_at, n.status,
                       CONCAT(s.first_name, ' ', s.last_name) AS student_name
                FROM notifications n
                JOIN students s ON s.id = n.student_id
                WHERE n.teacher_id=%s
                ORDER BY n.sent_at DESC, n.id DESC
                LIMIT %s
                """,
                (int(teacher_id), int(limit)),
            )
            return [
                Notification(
                    id=int(r["id"]),
                    student_id=int(r["student_id"]),
                    teacher_id=int(r["teacher_id"]),
                    type=NotificationType(r["type"]),
                    message=r["message"],
                    sent_at=r["sent_at"],
                    status=NotificationStatus(r["status"]),
                    student_name=r.get("student_name"),
                )
                for r in fetchall(cur)
            ]

    def mark_read(self, *, notification_id: int, teacher_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM notifications WHERE id=%s AND teacher_id=%s",
                (int(notification_id), int(teacher_id)),
            )
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE notifications SET status=%s WHERE id=%s",
                (NotificationStatus.READ.value, int(notification_id)),
            )
            return True

    def exists_since(self, *, student_id: int, teacher_id: int, type: NotificationType, since: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM notifications
                WHERE student_id=%s AND teacher_id=%s AND type=%s AND sent_at >= %s
                LIMIT 1
                """,
                (int(student_id), int(teacher_id), type.value, since),
            )
            return fetchone(cur) is not None
