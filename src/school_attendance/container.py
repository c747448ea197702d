from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from .attendance.factory import LatenessStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .late_tracking.mysql_late_tracking_repository import MySQLLateTrackingRepository
from .late_tracking.service import QuarterLateAccumulator
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationDispatcher
from .qr.codec import QRTokenCodec
from .quarters.mysql_quarter_repository import MySQLQuarterRepository
from .quarters.service import QuarterService
from .school_calendar.clock import SchoolClock
from .school_calendar.mysql_calendar_repository import MySQLCalendarRepository
from .school_calendar.service import SchoolCalendar
from .sms.client import SMSDeliveryClient
from .sms.mysql_sms_log_repository import MySQLSMSLogRepository
from .sms.pipeline import SMSPipeline
from .sms.settings import SMSSettings
from .sms.templates import SMSTemplateBuilder
from .students.mysql_student_repository import MySQLStudentRepository
from .users.auth import make_roles_required
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import IdentityResolver


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: SchoolClock
    sms_executor: ThreadPoolExecutor

    identity_resolver: IdentityResolver
    roles_required: Callable

    quarter_service: QuarterService
    late_accumulator: QuarterLateAccumulator
    sms_pipeline: SMSPipeline
    notification_service: NotificationDispatcher
    attendance_service: AttendanceService

    notification_limit: int = 20

    def shutdown(self) -> None:
        self.sms_executor.shutdown(wait=True)


def build_container(settings) -> Container:
    """Wire repositories and services once at start.

    ``settings`` is a settings module (or any object exposing the same names).
    """
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))
    clock = SchoolClock(settings.SCHOOL_TIMEZONE)

    users_repo = MySQLUserRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    quarters_repo = MySQLQuarterRepository(conn)
    calendar_repo = MySQLCalendarRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    late_repo = MySQLLateTrackingRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    sms_logs_repo = MySQLSMSLogRepository(conn)

    identity_resolver = IdentityResolver(users_repo)
    quarter_service = QuarterService(quarters_repo, clock)
    late_accumulator = QuarterLateAccumulator(late_repo, threshold_minutes=settings.LATE_THRESHOLD_MINUTES)

    sms_settings = SMSSettings.from_settings(settings)
    sms_executor = ThreadPoolExecutor(max_workers=sms_settings.workers, thread_name_prefix="sms")
    sms_pipeline = SMSPipeline(
        executor=sms_executor,
        templates=SMSTemplateBuilder(
            quarter_limit_minutes=sms_settings.quarter_limit_minutes,
            critical_remaining_minutes=sms_settings.critical_remaining_minutes,
            moderate_remaining_minutes=sms_settings.moderate_remaining_minutes,
        ),
        client=SMSDeliveryClient(sms_settings),
        logs=sms_logs_repo,
        accumulator=late_accumulator,
    )

    notification_service = NotificationDispatcher(
        notifications_repo,
        students_repo,
        attendance_repo,
        calendar=SchoolCalendar(calendar_repo),
        clock=clock,
        sms=sms_pipeline,
        late_threshold_minutes=settings.LATE_THRESHOLD_MINUTES,
        absence_streak_days=settings.ABSENCE_STREAK_DAYS,
    )

    codec = QRTokenCodec(settings.QR_SECRET_SALT, students_repo.list_active_qr_secrets)
    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        quarter_service,
        codec=codec,
        clock=clock,
        accumulator=late_accumulator,
        notifier=notification_service,
        sms=sms_pipeline,
        strategy_factory=LatenessStrategyFactory(),
        grace_seconds=settings.GRACE_PERIOD_SECONDS,
    )

    return Container(
        conn=conn,
        clock=clock,
        sms_executor=sms_executor,
        identity_resolver=identity_resolver,
        roles_required=make_roles_required(identity_resolver),
        quarter_service=quarter_service,
        late_accumulator=late_accumulator,
        sms_pipeline=sms_pipeline,
        notification_service=notification_service,
        attendance_service=attendance_service,
        notification_limit=getattr(settings, "NOTIFICATION_LIMIT", 20),
    )
