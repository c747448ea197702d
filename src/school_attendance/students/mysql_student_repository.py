from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = """
    id, student_code, qr_secret, first_name, last_name, middle_name,
    level_id, specialization_id, section_id, adviser_id, mobile_number
"""


def _to_student(r: dict) -> Student:
    return Student(
        id=int(r["id"]),
        student_code=r["student_code"],
        qr_secret=r["qr_secret"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        middle_name=r.get("middle_name"),
        level_id=r.get("level_id"),
        specialization_id=r.get("specialization_id"),
        section_id=r.get("section_id"),
        adviser_id=r.get("adviser_id"),
        mobile_number=r.get("mobile_number"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE id=%s AND deleted_at IS NULL",
                (int(student_id),),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_qr_secret(self, qr_secret: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE qr_secret=%s AND deleted_at IS NULL",
                (qr_secret,),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_active_qr_secrets(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT qr_secret FROM students WHERE deleted_at IS NULL")
            return [r["qr_secret"] for r in fetchall(cur)]

    def list_by_adviser(self, adviser_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM students
                WHERE adviser_id=%s AND deleted_at IS NULL
                ORDER BY last_name, first_name
                """,
                (int(adviser_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]
