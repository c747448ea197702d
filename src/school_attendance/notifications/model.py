from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationStatus, NotificationType


@dataclass(frozen=True)
class Notification:
    id: int
    student_id: int
    teacher_id: int
    type: NotificationType
    message: str
    sent_at: datetime
    status: NotificationStatus = NotificationStatus.SENT
    student_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "teacher_id": self.teacher_id,
            "type": self.type.value,
            "message": self.message,
            "sent_at": self.sent_at.isoformat(),
            "status": self.status.value,
        }
