from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import SMSMessageType, SMSStatus


@dataclass(frozen=True)
class SMSMessage:
    message: str
    message_type: SMSMessageType
    should_send: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class SMSSendResult:
    success: bool
    status: SMSStatus
    message_id: Optional[str] = None
    provider_response: Any = None
    error: Optional[str] = None
    attempts: int = 0


@dataclass(frozen=True)
class SMSLog:
    student_id: int
    mobile_number: str
    message: str
    message_type: SMSMessageType
    status: SMSStatus
    attendance_log_id: Optional[int] = None
    provider_response: Optional[str] = None
    provider_message_id: Optional[str] = None
    error_message: Optional[str] = None
    retry_count: int = 0
    sent_at: Optional[datetime] = None
    id: Optional[int] = None
