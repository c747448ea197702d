from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Caller, caller_from_row
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_by_id(self, user_id: int) -> Optional[Caller]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, role, position
                FROM users
                WHERE user_id=%s AND status='Active'
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return caller_from_row(r) if r else None
