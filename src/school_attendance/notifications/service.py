from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from ..attendance.model import AttendanceLog
from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import AuthorizationError, NotFoundError
from ..school_calendar.clock import SchoolClock
from ..school_calendar.service import SchoolCalendar
from ..sms.pipeline import SMSPipeline
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.model import Caller, TeacherUser
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """In-app alerts for homeroom teachers.

    ``sent_at`` is stored as naive UTC, the same as every other timestamp the
    app writes.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        students: StudentRepository,
        attendance: AttendanceRepository,
        *,
        calendar: SchoolCalendar,
        clock: SchoolClock,
        sms: SMSPipeline | None = None,
        late_threshold_minutes: int,
        absence_streak_days: int,
    ):
        self._notifications = notifications
        self._students = students
        self._attendance = attendance
        self._calendar = calendar
        self._clock = clock
        self._sms = sms
        self._threshold = int(late_threshold_minutes)
        self._streak = int(absence_streak_days)

    def _utc_naive(self, value: datetime) -> datetime:
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def notify_late_threshold(
        self,
        student: Student,
        total_minutes: int,
        attendance: Optional[AttendanceLog] = None,
        *,
        quarter_id: Optional[int] = None,
    ) -> Optional[Notification]:
        notification = None
        if student.adviser_id is None:
            logger.warning("Student %s crossed the late threshold but has no adviser", student.id)
        else:
            try:
                notification = self._notifications.create(
                    student_id=student.id,
                    teacher_id=student.adviser_id,
                    type=NotificationType.LATE_THRESHOLD,
                    message=(
                        f"{student.full_name} has exceeded the {self._threshold}-minute late threshold "
                        f"with {total_minutes} minutes of tardiness this quarter."
                    ),
                    sent_at=self._utc_naive(self._clock.now()),
                )
                logger.info("Late threshold notification #%s sent to teacher %s", notification.id, student.adviser_id)
            except Exception:
                # The guardian SMS below still goes out.
                logger.exception("Could not store late threshold notification for student %s", student.id)

        if attendance is not None and quarter_id is not None and self._sms is not None:
            try:
                self._sms.submit_time_in(student, attendance, quarter_id=quarter_id, total_late_minutes=total_minutes)
            except Exception:
                logger.exception("Could not hand off SMS for student %s", student.id)

        return notification

    def check_consecutive_absences(
        self,
        teacher: Caller,
        advisees: Optional[Iterable[Student]] = None,
        today: Optional[date] = None,
    ) -> list[Notification]:
        if not isinstance(teacher, TeacherUser):
            raise AuthorizationError("Only teachers can run the absence check")

        today = today or self._clock.business_date()
        window = self._calendar.previous_school_days(today, self._streak)
        if len(window) < self._streak:
            logger.info("Not enough school days before %s for an absence streak", today.isoformat())
            return []

        window_start = datetime.combine(min(window), time.min, tzinfo=self._clock.tz)
        since = self._utc_naive(window_start)
        students = list(advisees) if advisees is not None else list(self._students.list_by_adviser(teacher.user_id))

        created: list[Notification] = []
        for student in students:
            present = self._attendance.list_dates_with_time_in(student.id, window)
            if present:
                continue

            if self._notifications.exists_since(
                student_id=student.id,
                teacher_id=teacher.user_id,
                type=NotificationType.CONSECUTIVE_ABSENCE,
                since=since,
            ):
                continue

            created.append(
                self._notifications.create(
                    student_id=student.id,
                    teacher_id=teacher.user_id,
                    type=NotificationType.CONSECUTIVE_ABSENCE,
                    message=f"{student.full_name} has been absent for {self._streak} consecutive school days.",
                    sent_at=self._utc_naive(self._clock.now()),
                )
            )

        if created:
            logger.info("Absence check for teacher %s created %s notification(s)", teacher.user_id, len(created))
        return created

    def get_teacher_notifications(self, teacher: Caller, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> list[Notification]:
        if not isinstance(teacher, TeacherUser):
            raise AuthorizationError("Only teachers have notifications")
        return list(self._notifications.list_for_teacher(teacher.user_id, max(int(limit), 1)))

    def mark_notification_read(self, notification_id: int, teacher: Caller) -> None:
        if not isinstance(teacher, TeacherUser):
            raise AuthorizationError("Only teachers have notifications")
        if not self._notifications.mark_read(notification_id=int(notification_id), teacher_id=teacher.user_id):
            raise NotFoundError("Notification not found")
