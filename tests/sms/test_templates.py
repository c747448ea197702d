from datetime import date, time

import pytest

from fakes import make_student
from school_attendance.attendance.model import AttendanceLog
from school_attendance.core.enums import SMSMessageType
from school_attendance.late_tracking.model import LateTally
from school_attendance.sms.templates import SMSTemplateBuilder, format_date_short, format_time_12h

BUILDER = SMSTemplateBuilder(quarter_limit_minutes=70, critical_remaining_minutes=15, moderate_remaining_minutes=30)


def _log(time_in=time(7, 25), late=0):
    return AttendanceLog(
        id=1, student_id=1, attendance_date=date(2026, 10, 19), time_in=time_in, is_late=late > 0, late_minutes=late
    )


def _tally(total):
    return LateTally(total_minutes=total, crossed_threshold=False, notification_sent=False)


@pytest.mark.parametrize(
    "value, expected",
    [(time(0, 5), "12:05 AM"), (time(7, 25), "7:25 AM"), (time(12, 0), "12:00 PM"), (time(16, 9), "4:09 PM")],
)
def test_format_time_12h(value, expected):
    assert format_time_12h(value) == expected


def test_format_date_short():
    assert format_date_short(date(2026, 10, 18)) == "Oct 18, 2026"


def test_on_time_confirmation():
    msg = BUILDER.build_time_in_message(make_student(1, "Juan"), _log(), _tally(0))

    assert msg.should_send is True
    assert msg.message_type is SMSMessageType.TIME_IN_SUCCESS
    assert msg.message == "Hi Juan! Time-in recorded at 7:25 AM on Oct 19, 2026. Have a great day!"


def test_no_mobile_number_is_not_sent():
    msg = BUILDER.build_time_in_message(make_student(2, "Maria", mobile=None), _log(), _tally(0))

    assert msg.should_send is False
    assert msg.reason == "Student has no mobile number"


def test_late_informational_when_far_from_limit():
    msg = BUILDER.build_time_in_message(make_student(1, "Juan"), _log(time(7, 40), late=10), _tally(20))

    assert msg.message_type is SMSMessageType.TIME_IN_LATE
    assert "You are 10 min late today." in msg.message
    assert "Total late this quarter: 20/70 min." in msg.message
    assert "remaining" not in msg.message


def test_late_moderate_note():
    msg = BUILDER.build_time_in_message(make_student(1, "Juan"), _log(time(7, 40), late=10), _tally(45))

    assert msg.message_type is SMSMessageType.TIME_IN_LATE
    assert msg.message.endswith("Note: 25 min remaining this quarter.")


def test_late_critical_warning():
    msg = BUILDER.build_time_in_message(make_student(1, "Juan"), _log(time(8, 45), late=75), _tally(75))

    assert msg.message_type is SMSMessageType.TIME_IN_LATE_CRITICAL
    assert msg.message.endswith("WARNING: Only -5 min remaining!")


def test_validate_message():
    assert SMSTemplateBuilder.validate_message("") == (False, "Message is empty")
    assert SMSTemplateBuilder.validate_message("   ") == (False, "Message is empty")
    assert SMSTemplateBuilder.validate_message("x" * 600) == (True, None)
