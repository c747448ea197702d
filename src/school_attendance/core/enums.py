from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles as stored in the users table."""

    ADMIN = "Admin"
    TEACHER = "Teacher"
    STAFF = "Staff"


class ScanAction(str, Enum):
    TIME_IN = "time_in"
    TIME_OUT = "time_out"


class NotificationType(str, Enum):
    LATE_THRESHOLD = "Late Threshold"
    CONSECUTIVE_ABSENCE = "Consecutive Absence"


class NotificationStatus(str, Enum):
    SENT = "Sent"
    READ = "Read"


class CalendarDayKind(str, Enum):
    """Kinds of school calendar exceptions."""

    HOLIDAY = "HOL"
    SUSPENSION = "SUS"
    MAKEUP = "MAKEUP"


class SMSMessageType(str, Enum):
    TIME_IN_SUCCESS = "TIME_IN_SUCCESS"
    TIME_IN_LATE = "TIME_IN_LATE"
    TIME_IN_LATE_CRITICAL = "TIME_IN_LATE_CRITICAL"


class SMSStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    MOCK = "mock"
