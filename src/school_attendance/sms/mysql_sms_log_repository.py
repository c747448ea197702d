from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import SMSLog
from .repository import SMSLogRepository


class MySQLSMSLogRepository(SMSLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, log: SMSLog) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sms_logs(
                    attendance_log_id, student_id, mobile_number, message, message_type, status,
                    provider_response, provider_message_id, error_message, retry_count, sent_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    log.attendance_log_id,
                    int(log.student_id),
                    log.mobile_number,
                    log.message,
                    log.message_type.value,
                    log.status.value,
                    log.provider_response,
                    log.provider_message_id,
                    (log.error_message or "")[:255] or None,
                    int(log.retry_count),
                    log.sent_at,
                ),
            )
            return int(cur.lastrowid)
