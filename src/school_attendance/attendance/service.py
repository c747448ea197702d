from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..core.enums import ScanAction
from ..core.exceptions import (
    AttendanceCompletedError,
    DomainError,
    InvalidQRCodeError,
    NotFoundError,
    ScanProcessingError,
    StudentNotFoundError,
)
from ..late_tracking.service import QuarterLateAccumulator
from ..notifications.service import NotificationDispatcher
from ..qr.codec import QRTokenCodec
from ..quarters.model import Quarter
from ..quarters.service import QuarterService
from ..school_calendar.clock import SchoolClock
from ..sms.pipeline import SMSPipeline
from ..students.model import Student
from ..students.repository import StudentRepository
from .factory import LatenessStrategyFactory
from .model import AttendanceLog, ScanResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Per student per business day: NoRecord -> TimedIn -> Completed.

    The ledger row and the quarter late total are written in one transaction
    on the request thread. Notifications and SMS come after and never fail
    the scan.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        quarters: QuarterService,
        *,
        codec: QRTokenCodec,
        clock: SchoolClock,
        accumulator: QuarterLateAccumulator,
        notifier: NotificationDispatcher,
        sms: SMSPipeline,
        strategy_factory: LatenessStrategyFactory | None = None,
        grace_seconds: int = 60,
    ):
        self._attendance = attendance
        self._students = students
        self._quarters = quarters
        self._codec = codec
        self._clock = clock
        self._accumulator = accumulator
        self._notifier = notifier
        self._sms = sms
        self._factory = strategy_factory or LatenessStrategyFactory()
        self._grace_seconds = int(grace_seconds)

    def scan(self, qr_payload: str) -> ScanResult:
        secret = self._codec.decode_and_verify(qr_payload)
        if secret is None:
            raise InvalidQRCodeError()

        student = self._students.get_by_qr_secret(secret)
        if student is None:
            raise StudentNotFoundError()

        today = self._clock.business_date()
        existing = self._attendance.get_for_student_and_date(student.id, today)

        if existing is None or existing.time_in is None:
            return self._time_in(student, existing, today)
        if existing.time_out is None:
            return self._time_out(student, existing)
        raise AttendanceCompletedError()

    def _time_in(self, student: Student, existing: Optional[AttendanceLog], today: date) -> ScanResult:
        quarter = self._quarters.get_active(today)
        now = self._clock.business_time()

        strategy = self._factory.for_time_in(
            time_in=now, school_start=quarter.school_start_time, grace_seconds=self._grace_seconds
        )
        decision = strategy.decide_time_in(
            time_in=now, school_start=quarter.school_start_time, grace_seconds=self._grace_seconds
        )

        late = None
        if decision.is_late and decision.late_minutes > 0:
            late = self._accumulator.prepare(student.id, quarter.id, decision.late_minutes)

        try:
            if existing is None:
                log, tally = self._attendance.create_time_in(
                    student_id=student.id,
                    attendance_date=today,
                    time_in=now,
                    is_late=decision.is_late,
                    late_minutes=decision.late_minutes,
                    late=late,
                )
            else:
                tally = self._attendance.update_time_in(
                    log_id=existing.id,
                    time_in=now,
                    is_late=decision.is_late,
                    late_minutes=decision.late_minutes,
                    late=late,
                )
                log = AttendanceLog(
                    id=existing.id,
                    student_id=student.id,
                    attendance_date=today,
                    time_in=now,
                    is_late=decision.is_late,
                    late_minutes=decision.late_minutes,
                )
        except DomainError:
            raise
        except Exception as e:
            if late is None:
                raise
            # Row and quarter total share one transaction, so neither was written.
            logger.error(
                "Late time-in rolled back for student %s, quarter %s (%s min)",
                student.id,
                quarter.id,
                decision.late_minutes,
                exc_info=True,
            )
            raise ScanProcessingError("Failed to update late tracking") from e

        logger.info(
            "Time-in for student %s at %s (late=%s, minutes=%s)",
            student.id,
            now.isoformat(),
            decision.is_late,
            decision.late_minutes,
        )

        if late is None or tally is None:
            self._hand_off_sms(student, log, quarter)
            return ScanResult(student=student, attendance=log, action=ScanAction.TIME_IN, is_late=decision.is_late)

        self._accumulator.applied(late, tally)
        if tally.crossed_threshold:
            try:
                self._notifier.notify_late_threshold(student, tally.total_minutes, log, quarter_id=quarter.id)
            except Exception:
                logger.exception("Late threshold notification failed for student %s", student.id)
                # The notifier hands off the SMS last, so it has not gone out yet.
                self._hand_off_sms(student, log, quarter, tally.total_minutes)
        else:
            self._hand_off_sms(student, log, quarter, tally.total_minutes)

        return ScanResult(
            student=student,
            attendance=log,
            action=ScanAction.TIME_IN,
            is_late=True,
            late_minutes=decision.late_minutes,
            total_late_minutes=tally.total_minutes,
            notification_triggered=tally.crossed_threshold,
        )

    def _time_out(self, student: Student, existing: AttendanceLog) -> ScanResult:
        now = self._clock.business_time()
        if not self._attendance.set_time_out(log_id=existing.id, time_out=now):
            raise AttendanceCompletedError()

        logger.info("Time-out for student %s at %s", student.id, now.isoformat())
        log = AttendanceLog(
            id=existing.id,
            student_id=existing.student_id,
            attendance_date=existing.attendance_date,
            time_in=existing.time_in,
            time_out=now,
            is_late=existing.is_late,
            late_minutes=existing.late_minutes,
        )
        return ScanResult(student=student, attendance=log, action=ScanAction.TIME_OUT, is_late=existing.is_late)

    def _hand_off_sms(
        self, student: Student, log: AttendanceLog, quarter: Quarter, total_late_minutes: Optional[int] = None
    ) -> None:
        try:
            self._sms.submit_time_in(student, log, quarter_id=quarter.id, total_late_minutes=total_late_minutes)
        except Exception:
            logger.exception("Could not hand off SMS for student %s", student.id)

    def generate_printable_code(self, secret_token: str) -> str:
        return self._codec.encode_for_print(secret_token)

    def generate_printable_code_for_student(self, student_id: int) -> str:
        student = self._students.get_by_id(student_id)
        if student is None:
            raise NotFoundError("Student not found")
        return self.generate_printable_code(student.qr_secret)

    def get_today_record(self, student_id: int) -> Optional[AttendanceLog]:
        """Today's row for a student, or None. Unknown students raise NotFoundError."""
        if self._students.get_by_id(student_id) is None:
            raise NotFoundError("Student not found")
        return self._attendance.get_for_student_and_date(student_id, self._clock.business_date())
