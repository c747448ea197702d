import pytest

from fakes import RecordingConnection, RecordingConnectionFactory
from school_attendance.late_tracking.mysql_late_tracking_repository import MySQLLateTrackingRepository


def _repo(conn: RecordingConnection) -> MySQLLateTrackingRepository:
    return MySQLLateTrackingRepository(RecordingConnectionFactory(conn))


def test_ensure_lock_update_run_in_one_transaction():
    conn = RecordingConnection(rows=[{"total_late_minutes": 40, "notification_sent": 0}])

    tally = _repo(conn).add_late_minutes(student_id=7, quarter_id=1, minutes=25, threshold=70)

    kinds = [e[0] for e in conn.events]
    assert kinds == ["execute", "execute", "execute", "commit", "cursor_close", "close"]
    ensure, lock, update = conn.statements
    assert ensure.startswith("INSERT INTO quarter_late_tracking")
    assert "ON DUPLICATE KEY UPDATE" in ensure
    assert lock.startswith("SELECT total_late_minutes, notification_sent")
    assert lock.endswith("FOR UPDATE")
    assert update.startswith("UPDATE quarter_late_tracking")
    assert conn.events[2][2] == (65, 0, 7, 1)
    assert tally.total_minutes == 65
    assert tally.crossed_threshold is False


def test_already_notified_row_never_crosses_again():
    conn = RecordingConnection(rows=[{"total_late_minutes": 80, "notification_sent": 1}])

    tally = _repo(conn).add_late_minutes(student_id=7, quarter_id=1, minutes=10, threshold=70)

    assert tally.total_minutes == 90
    assert tally.crossed_threshold is False
    assert tally.notification_sent is True
    assert conn.events[2][2] == (90, 1, 7, 1)


def test_fresh_row_with_large_entry_crosses_and_sets_flag():
    conn = RecordingConnection(rows=[{"total_late_minutes": 0, "notification_sent": 0}])

    tally = _repo(conn).add_late_minutes(student_id=7, quarter_id=1, minutes=70, threshold=70)

    assert tally.crossed_threshold is True
    assert tally.notification_sent is True
    assert conn.events[2][2] == (70, 1, 7, 1)


def test_failure_inside_the_update_rolls_back():
    conn = RecordingConnection(
        rows=[{"total_late_minutes": 0, "notification_sent": 0}],
        fail_on=("UPDATE quarter_late_tracking", RuntimeError("Lock wait timeout exceeded")),
    )

    with pytest.raises(RuntimeError):
        _repo(conn).add_late_minutes(student_id=7, quarter_id=1, minutes=5, threshold=70)

    assert conn.count("commit") == 0
    assert conn.count("rollback") == 1
