from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import ScanAction
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceLog:
    """One row per (student, business date)."""

    id: int
    student_id: int
    attendance_date: date
    time_in: Optional[time]
    time_out: Optional[time] = None
    is_late: bool = False
    late_minutes: int = 0

    @property
    def is_completed(self) -> bool:
        return self.time_in is not None and self.time_out is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "attendance_date": self.attendance_date.isoformat(),
            "time_in": self.time_in.strftime("%H:%M:%S") if self.time_in else None,
            "time_out": self.time_out.strftime("%H:%M:%S") if self.time_out else None,
            "is_late": self.is_late,
            "late_minutes": self.late_minutes,
        }


@dataclass(frozen=True)
class ScanResult:
    student: Student
    attendance: AttendanceLog
    action: ScanAction
    is_late: bool = False
    late_minutes: Optional[int] = None
    total_late_minutes: Optional[int] = None
    notification_triggered: Optional[bool] = None

    def to_dict(self) -> dict:
        data = {
            "student": self.student.to_public_dict(),
            "attendance_log": self.attendance.to_dict(),
            "is_late": self.is_late,
            "action": self.action.value,
        }
        # Late-only facts are omitted for on-time and time-out scans.
        if self.late_minutes is not None:
            data["late_minutes"] = self.late_minutes
        if self.total_late_minutes is not None:
            data["total_late_minutes"] = self.total_late_minutes
        if self.notification_triggered is not None:
            data["notification_triggered"] = self.notification_triggered
        return data
