from __future__ import annotations

from dataclasses import dataclass

from ..core import constants


@dataclass(frozen=True)
class SMSSettings:
    api_url: str = constants.DEFAULT_SMS_API_URL
    api_token: str = ""
    sender_id: str = constants.DEFAULT_SMS_SENDER_ID
    timeout_seconds: float = constants.DEFAULT_SMS_TIMEOUT_SECONDS
    enabled: bool = False
    mock_mode: bool = False
    retry_attempts: int = constants.DEFAULT_SMS_RETRY_ATTEMPTS
    retry_delay_seconds: float = constants.DEFAULT_SMS_RETRY_DELAY_SECONDS
    workers: int = constants.DEFAULT_SMS_WORKERS
    quarter_limit_minutes: int = constants.DEFAULT_LATE_THRESHOLD_MINUTES
    critical_remaining_minutes: int = constants.DEFAULT_LATE_WARNING_CRITICAL_MINUTES
    moderate_remaining_minutes: int = constants.DEFAULT_LATE_WARNING_MODERATE_MINUTES

    @classmethod
    def from_settings(cls, settings) -> "SMSSettings":
        """Build from a settings module (or any object with the same attributes)."""
        return cls(
            api_url=settings.SMS_API_URL,
            api_token=settings.SMS_API_TOKEN,
            sender_id=settings.SMS_SENDER_ID,
            timeout_seconds=float(settings.SMS_TIMEOUT_SECONDS),
            enabled=bool(settings.SMS_ENABLED),
            mock_mode=bool(settings.SMS_MOCK_MODE),
            retry_attempts=max(int(settings.SMS_RETRY_ATTEMPTS), 0),
            retry_delay_seconds=max(float(settings.SMS_RETRY_DELAY_SECONDS), 0.0),
            workers=max(int(settings.SMS_WORKERS), 1),
            quarter_limit_minutes=int(settings.LATE_THRESHOLD_MINUTES),
            critical_remaining_minutes=int(settings.LATE_WARNING_CRITICAL_MINUTES),
            moderate_remaining_minutes=int(settings.LATE_WARNING_MODERATE_MINUTES),
        )
