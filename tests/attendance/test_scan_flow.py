from concurrent.futures import ThreadPoolExecutor
from datetime import time, timedelta

import pytest

from fakes import MONDAY, FailingLateTracking, FlakyLateTracking, build_world
from school_attendance.core.enums import NotificationType, ScanAction, SMSMessageType, SMSStatus
from school_attendance.core.exceptions import (
    AttendanceCompletedError,
    DuplicateScanError,
    InvalidQRCodeError,
    NoActiveQuarterError,
    NotFoundError,
    ScanProcessingError,
    StudentNotFoundError,
)


def test_on_time_in_then_out_then_rejected(world):
    qr = world.qr_for("Juan")

    world.now.set(7, 25)
    first = world.service.scan(qr)
    assert first.action is ScanAction.TIME_IN
    assert first.is_late is False
    assert first.attendance.time_in == time(7, 25)
    assert first.late_minutes is None

    world.now.set(16, 0)
    second = world.service.scan(qr)
    assert second.action is ScanAction.TIME_OUT
    assert second.attendance.time_out == time(16, 0)
    assert second.attendance.time_in == time(7, 25)

    world.now.set(16, 5)
    with pytest.raises(AttendanceCompletedError):
        world.service.scan(qr)

    assert len(world.attendance.rows) == 1
    assert world.late.get(student_id=1, quarter_id=1) is None


def test_on_time_scan_sends_confirmation_sms(world):
    world.service.scan(world.qr_for("Juan"))

    assert len(world.sms_logs.items) == 1
    log = world.sms_logs.items[0]
    assert log.status is SMSStatus.MOCK
    assert log.message_type is SMSMessageType.TIME_IN_SUCCESS
    assert log.mobile_number == "639171234567"
    assert log.message == "Hi Juan! Time-in recorded at 7:25 AM on Oct 19, 2026. Have a great day!"


def test_time_out_does_not_send_sms(world):
    qr = world.qr_for("Juan")
    world.service.scan(qr)
    world.now.set(16, 0)
    world.service.scan(qr)

    assert len(world.sms_logs.items) == 1


def test_late_scan_past_threshold_notifies_once_with_one_sms():
    world = build_world()
    world.now.set(8, 45)

    result = world.service.scan(world.qr_for("Juan"))

    assert result.is_late is True
    assert result.late_minutes == 75
    assert result.total_late_minutes == 75
    assert result.notification_triggered is True

    assert len(world.notifications.items) == 1
    note = world.notifications.items[0]
    assert note.type is NotificationType.LATE_THRESHOLD
    assert note.teacher_id == 10
    assert note.student_id == 1

    assert len(world.sms_logs.items) == 1
    assert world.sms_logs.items[0].message_type is SMSMessageType.TIME_IN_LATE_CRITICAL


def test_threshold_notification_fires_only_on_the_crossing_scan():
    world = build_world(threshold=70)

    totals = []
    for offset in range(4):
        world.now.set(8, 0, day=MONDAY + timedelta(days=offset))
        r = world.service.scan(world.qr_for("Juan"))
        totals.append((r.total_late_minutes, r.notification_triggered))

    assert totals == [(30, False), (60, False), (90, True), (120, False)]
    assert len(world.notifications.items) == 1
    assert world.late.get(student_id=1, quarter_id=1).notification_sent is True
    assert len(world.sms_logs.items) == 4


def test_grace_boundary_scans(world):
    world.now.set(7, 31, 0)
    on_time = world.service.scan(world.qr_for("Juan"))
    world.now.set(7, 31, 1)
    late = world.service.scan(world.qr_for("Pedro"))

    assert on_time.is_late is False
    assert late.is_late is True
    assert late.late_minutes == 1
    assert late.total_late_minutes == 1


def test_student_without_adviser_still_gets_sms_when_crossing():
    world = build_world(threshold=10)
    world.now.set(8, 0)

    result = world.service.scan(world.qr_for("Pedro"))

    assert result.notification_triggered is True
    assert world.notifications.items == []
    assert len(world.sms_logs.items) == 1


def test_student_without_mobile_writes_no_sms_log(world):
    world.service.scan(world.qr_for("Maria"))
    assert world.sms_logs.items == []


def test_tampered_code_is_rejected_with_generic_error(world):
    with pytest.raises(InvalidQRCodeError) as exc:
        world.service.scan("eyJub3QiOiAiYSBjb2RlIn0=")
    assert str(exc.value) == "Invalid or tampered QR code. Please contact administrator."
    assert world.attendance.rows == []


def test_soft_deleted_student_cannot_scan(world):
    qr = world.qr_for("Juan")
    world.students.deleted.add(1)

    with pytest.raises(InvalidQRCodeError):
        world.service.scan(qr)


def test_resolved_secret_without_student_row(world, monkeypatch):
    monkeypatch.setattr(world.students, "get_by_qr_secret", lambda _secret: None)
    with pytest.raises(StudentNotFoundError):
        world.service.scan(world.qr_for("Juan"))


def test_no_active_quarter_blocks_time_in(world):
    world.now.set(7, 0, day=MONDAY.replace(month=12))
    with pytest.raises(NoActiveQuarterError):
        world.service.scan(world.qr_for("Juan"))
    assert world.attendance.rows == []


def test_existing_row_without_time_in_is_filled(world):
    world.attendance.seed(student_id=1, attendance_date=MONDAY, time_in=None)

    result = world.service.scan(world.qr_for("Juan"))

    assert result.action is ScanAction.TIME_IN
    assert world.attendance.get_for_student_and_date(1, MONDAY).time_in == time(7, 25)
    assert len(world.attendance.rows) == 1


def test_losing_the_first_scan_race_raises_duplicate(world, monkeypatch):
    qr = world.qr_for("Juan")
    world.service.scan(qr)

    # Simulate a concurrent request that read "no record" before the first insert landed.
    monkeypatch.setattr(world.attendance, "get_for_student_and_date", lambda *_a: None)
    with pytest.raises(DuplicateScanError):
        world.service.scan(qr)

    assert len(world.attendance.rows) == 1


def test_accumulator_failure_rolls_back_the_time_in():
    world = build_world(late_tracking=FailingLateTracking())
    world.now.set(8, 0)

    with pytest.raises(ScanProcessingError):
        world.service.scan(world.qr_for("Juan"))

    assert world.attendance.get_for_student_and_date(1, MONDAY) is None
    assert world.sms_logs.items == []


def test_rescan_after_failed_late_update_records_time_in_and_total():
    world = build_world(late_tracking=FlakyLateTracking(failures=1))
    qr = world.qr_for("Juan")

    world.now.set(8, 0)
    with pytest.raises(ScanProcessingError):
        world.service.scan(qr)

    world.now.set(8, 1)
    retry = world.service.scan(qr)

    assert retry.action is ScanAction.TIME_IN
    assert retry.late_minutes == 31
    assert retry.total_late_minutes == 31
    row = world.attendance.get_for_student_and_date(1, MONDAY)
    assert row.late_minutes == world.late.get(student_id=1, quarter_id=1).total_late_minutes == 31
    assert len(world.sms_logs.items) == 1


def test_failed_late_fill_keeps_existing_row_empty():
    world = build_world(late_tracking=FlakyLateTracking(failures=1))
    world.attendance.seed(student_id=1, attendance_date=MONDAY, time_in=None)
    world.now.set(8, 0)

    with pytest.raises(ScanProcessingError):
        world.service.scan(world.qr_for("Juan"))
    assert world.attendance.get_for_student_and_date(1, MONDAY).time_in is None

    retry = world.service.scan(world.qr_for("Juan"))
    assert retry.action is ScanAction.TIME_IN
    assert world.late.get(student_id=1, quarter_id=1).total_late_minutes == 30


def test_notifier_failure_does_not_fail_scan(monkeypatch):
    world = build_world(threshold=10)
    world.now.set(8, 0)

    def boom(*_a, **_k):
        raise RuntimeError("notifications table locked")

    monkeypatch.setattr(world.notifier, "notify_late_threshold", boom)
    result = world.service.scan(world.qr_for("Juan"))

    assert result.notification_triggered is True
    assert world.notifications.items == []
    assert len(world.sms_logs.items) == 1


def test_notification_insert_failure_still_sends_the_critical_sms(monkeypatch):
    world = build_world()
    world.now.set(8, 45)

    def boom(**_k):
        raise RuntimeError("notifications table locked")

    monkeypatch.setattr(world.notifications, "create", boom)
    result = world.service.scan(world.qr_for("Juan"))

    assert result.notification_triggered is True
    assert len(world.sms_logs.items) == 1
    sms = world.sms_logs.items[0]
    assert sms.message_type is SMSMessageType.TIME_IN_LATE_CRITICAL
    assert "Total late this quarter: 75/70 min." in sms.message


def test_sms_handoff_failure_does_not_fail_scan(world, monkeypatch):
    def boom(*_a, **_k):
        raise RuntimeError("executor shut down")

    monkeypatch.setattr(world.sms_pipeline, "submit_time_in", boom)
    result = world.service.scan(world.qr_for("Juan"))

    assert result.action is ScanAction.TIME_IN


def test_concurrent_crossing_scans_produce_one_notification():
    world = build_world(threshold=70)
    world.late.add_late_minutes(student_id=1, quarter_id=1, minutes=60, threshold=70)
    student = world.students_by_name["Juan"]

    def crossing():
        tally = world.accumulator.add_late_minutes(student.id, 1, 15)
        if tally.crossed_threshold:
            world.notifier.notify_late_threshold(student, tally.total_minutes)
        return tally

    with ThreadPoolExecutor(max_workers=8) as pool:
        tallies = list(pool.map(lambda _i: crossing(), range(8)))

    assert sum(t.crossed_threshold for t in tallies) == 1
    assert len(world.notifications.items) == 1
    assert world.late.get(student_id=1, quarter_id=1).total_late_minutes == 60 + 8 * 15


def test_printable_code_for_student(world):
    payload = world.service.generate_printable_code_for_student(1)
    assert world.codec.decode_and_verify(payload) == world.students_by_name["Juan"].qr_secret

    with pytest.raises(NotFoundError):
        world.service.generate_printable_code_for_student(999)


def test_get_today_record(world):
    assert world.service.get_today_record(1) is None
    world.service.scan(world.qr_for("Juan"))
    assert world.service.get_today_record(1).time_in == time(7, 25)

    with pytest.raises(NotFoundError):
        world.service.get_today_record(999)
