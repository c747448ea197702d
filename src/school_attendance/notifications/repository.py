from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        student_id: int,
        teacher_id: int,
        type: NotificationType,
        message: str,
        sent_at: datetime,
    ) -> Notification:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int, limit: int) -> Sequence[Notification]:
        """Newest first, with the student's name filled in."""
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, teacher_id: int) -> bool:
        """False when the row does not exist or belongs to another teacher."""
        raise NotImplementedError

    def exists_since(self, *, student_id: int, teacher_id: int, type: NotificationType, since: datetime) -> bool:
        raise NotImplementedError
