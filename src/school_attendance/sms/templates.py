from __future__ import annotations

import logging
from datetime import date, time

from ..attendance.model import AttendanceLog
from ..core.constants import SMS_SEGMENT_LENGTH
from ..core.enums import SMSMessageType
from ..late_tracking.model import LateTally
from ..students.model import Student
from .model import SMSMessage

logger = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_time_12h(value: time) -> str:
    """``07:25:00`` -> ``7:25 AM``; ``12:05`` -> ``12:05 PM``."""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_date_short(value: date) -> str:
    """``2026-10-18`` -> ``Oct 18, 2026`` (locale independent)."""
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"


class SMSTemplateBuilder:
    """Builds the guardian text for a time-in."""

    def __init__(self, *, quarter_limit_minutes: int, critical_remaining_minutes: int, moderate_remaining_minutes: int):
        self._limit = int(quarter_limit_minutes)
        self._critical = int(critical_remaining_minutes)
        self._moderate = int(moderate_remaining_minutes)

    def build_time_in_message(self, student: Student, attendance: AttendanceLog, late_tracking: LateTally) -> SMSMessage:
        if not student.mobile_number:
            return SMSMessage(
                message="",
                message_type=SMSMessageType.TIME_IN_SUCCESS,
                should_send=False,
                reason="Student has no mobile number",
            )
        if attendance.time_in is None:
            return SMSMessage(
                message="",
                message_type=SMSMessageType.TIME_IN_SUCCESS,
                should_send=False,
                reason="Attendance has no time-in",
            )

        shown_time = format_time_12h(attendance.time_in)
        shown_date = format_date_short(attendance.attendance_date)

        if not attendance.is_late:
            return SMSMessage(
                message=f"Hi {student.first_name}! Time-in recorded at {shown_time} on {shown_date}. Have a great day!",
                message_type=SMSMessageType.TIME_IN_SUCCESS,
                should_send=True,
            )

        total = late_tracking.total_minutes
        remaining = self._limit - total
        message = (
            f"Hi {student.first_name}! Time-in recorded at {shown_time} on {shown_date}. "
            f"You are {attendance.late_minutes} min late today. "
            f"Total late this quarter: {total}/{self._limit} min. "
        )

        if remaining <= self._critical:
            message += f"WARNING: Only {remaining} min remaining!"
            message_type = SMSMessageType.TIME_IN_LATE_CRITICAL
        elif remaining <= self._moderate:
            message += f"Note: {remaining} min remaining this quarter."
            message_type = SMSMessageType.TIME_IN_LATE
        else:
            message_type = SMSMessageType.TIME_IN_LATE

        return SMSMessage(message=message.strip(), message_type=message_type, should_send=True)

    @staticmethod
    def validate_message(message: str) -> tuple[bool, str | None]:
        if not message or not message.strip():
            return False, "Message is empty"
        if len(message) > SMS_SEGMENT_LENGTH * 3:
            logger.warning("SMS message is very long: %s chars", len(message))
        return True, None
