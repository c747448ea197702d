from __future__ import annotations

import json
import logging
from concurrent.futures import Executor, Future
from dataclasses import replace
from typing import Optional

from ..attendance.model import AttendanceLog
from ..core.enums import SMSStatus
from ..late_tracking.model import LateTally
from ..late_tracking.service import QuarterLateAccumulator
from ..school_calendar.clock import utc_now
from ..students.model import Student
from .client import SMSDeliveryClient, normalize_mobile_number
from .model import SMSLog
from .repository import SMSLogRepository
from .templates import SMSTemplateBuilder

logger = logging.getLogger(__name__)


class SMSPipeline:
    """Template -> delivery -> sms_logs row, run off the request thread.

    Every failure in here is logged and swallowed: SMS is never on the
    attendance-of-record path.
    """

    def __init__(
        self,
        *,
        executor: Executor,
        templates: SMSTemplateBuilder,
        client: SMSDeliveryClient,
        logs: SMSLogRepository,
        accumulator: QuarterLateAccumulator,
    ):
        self._executor = executor
        self._templates = templates
        self._client = client
        self._logs = logs
        self._accumulator = accumulator

    def submit_time_in(
        self,
        student: Student,
        attendance: AttendanceLog,
        *,
        quarter_id: int,
        total_late_minutes: Optional[int] = None,
    ) -> Future:
        return self._executor.submit(
            self.deliver_time_in, student, attendance, quarter_id=quarter_id, total_late_minutes=total_late_minutes
        )

    def deliver_time_in(
        self,
        student: Student,
        attendance: AttendanceLog,
        *,
        quarter_id: int,
        total_late_minutes: Optional[int] = None,
    ) -> Optional[SMSLog]:
        """``total_late_minutes`` is the figure the scan produced; without it the tally is read back."""
        try:
            return self._deliver(student, attendance, quarter_id, total_late_minutes)
        except Exception:
            logger.exception("SMS delivery for student %s (attendance %s) failed", student.id, attendance.id)
            return None

    def _tally_for(self, student: Student, attendance: AttendanceLog, quarter_id: int, total: Optional[int]) -> LateTally:
        if not attendance.is_late:
            return LateTally(total_minutes=0, crossed_threshold=False, notification_sent=False)
        if total is not None:
            return LateTally(total_minutes=int(total), crossed_threshold=False, notification_sent=False)
        return self._accumulator.get_tally(student.id, quarter_id)

    def _deliver(
        self, student: Student, attendance: AttendanceLog, quarter_id: int, total: Optional[int]
    ) -> Optional[SMSLog]:
        tally = self._tally_for(student, attendance, quarter_id, total)
        built = self._templates.build_time_in_message(student, attendance, tally)
        if not built.should_send:
            logger.info("Skipping SMS for student %s: %s", student.id, built.reason)
            return None

        valid, error = self._templates.validate_message(built.message)
        if not valid:
            logger.warning("Skipping SMS for student %s: %s", student.id, error)
            return None

        mobile = normalize_mobile_number(student.mobile_number) or student.mobile_number
        result = self._client.send(mobile, built.message)

        delivered = result.status in (SMSStatus.SENT, SMSStatus.MOCK)
        log = SMSLog(
            student_id=student.id,
            attendance_log_id=attendance.id,
            mobile_number=mobile,
            message=built.message,
            message_type=built.message_type,
            status=result.status,
            provider_response=json.dumps(result.provider_response) if result.provider_response is not None else None,
            provider_message_id=result.message_id,
            error_message=result.error,
            retry_count=max(result.attempts - 1, 0),
            sent_at=utc_now().replace(tzinfo=None) if delivered else None,
        )
        log_id = self._logs.create(log)

        if delivered:
            logger.info("SMS %s for student %s logged as #%s", result.status.value, student.id, log_id)
        else:
            logger.warning("SMS for student %s failed: %s", student.id, result.error)
        return replace(log, id=log_id)

    def status(self) -> dict:
        return self._client.status()
