from datetime import time

import mysql.connector
import pytest

from fakes import MONDAY, RecordingConnection, RecordingConnectionFactory
from school_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from school_attendance.core.exceptions import DuplicateScanError
from school_attendance.late_tracking.model import LateMinutesUpdate

LATE = LateMinutesUpdate(student_id=1, quarter_id=1, minutes=30, threshold=70)


def test_late_time_in_and_quarter_total_share_one_commit():
    conn = RecordingConnection(rows=[{"total_late_minutes": 45, "notification_sent": 0}], next_id=99)
    factory = RecordingConnectionFactory(conn)

    log, tally = MySQLAttendanceRepository(factory).create_time_in(
        student_id=1, attendance_date=MONDAY, time_in=time(8, 0), is_late=True, late_minutes=30, late=LATE
    )

    assert len(factory.opened) == 1
    assert [s.split("(")[0].split(" SET")[0] for s in conn.statements] == [
        "INSERT INTO attendance_log",
        "INSERT INTO quarter_late_tracking",
        "SELECT total_late_minutes, notification_sent FROM quarter_late_tracking WHERE student_id=%s AND quarter_id=%s FOR UPDATE",
        "UPDATE quarter_late_tracking",
    ]
    assert conn.count("commit") == 1
    assert conn.events.index(("commit",)) > max(i for i, e in enumerate(conn.events) if e[0] == "execute")
    assert log.id == 99 and log.late_minutes == 30
    assert tally.total_minutes == 75 and tally.crossed_threshold is True


def test_on_time_time_in_touches_only_the_ledger():
    conn = RecordingConnection(next_id=5)

    log, tally = MySQLAttendanceRepository(RecordingConnectionFactory(conn)).create_time_in(
        student_id=1, attendance_date=MONDAY, time_in=time(7, 25), is_late=False, late_minutes=0
    )

    assert tally is None
    assert len(conn.statements) == 1
    assert conn.count("commit") == 1


def test_failed_quarter_update_rolls_back_the_ledger_insert():
    conn = RecordingConnection(fail_on=("SELECT total_late_minutes", RuntimeError("Deadlock found")))

    with pytest.raises(RuntimeError):
        MySQLAttendanceRepository(RecordingConnectionFactory(conn)).create_time_in(
            student_id=1, attendance_date=MONDAY, time_in=time(8, 0), is_late=True, late_minutes=30, late=LATE
        )

    assert conn.statements[0].startswith("INSERT INTO attendance_log")
    assert conn.count("commit") == 0
    assert conn.count("rollback") == 1


def test_duplicate_key_becomes_duplicate_scan():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062)
    conn = RecordingConnection(fail_on=("INSERT INTO attendance_log", dup))

    with pytest.raises(DuplicateScanError):
        MySQLAttendanceRepository(RecordingConnectionFactory(conn)).create_time_in(
            student_id=1, attendance_date=MONDAY, time_in=time(8, 0), is_late=True, late_minutes=30, late=LATE
        )

    assert len(conn.statements) == 1
    assert conn.count("rollback") == 1


def test_filling_an_already_filled_row_rolls_back_without_touching_the_total():
    conn = RecordingConnection(update_rowcount=0)

    with pytest.raises(DuplicateScanError):
        MySQLAttendanceRepository(RecordingConnectionFactory(conn)).update_time_in(
            log_id=3, time_in=time(8, 0), is_late=True, late_minutes=30, late=LATE
        )

    assert len(conn.statements) == 1
    assert conn.count("rollback") == 1
