"""PhilSMS delivery client.

Validation happens before any network I/O. A call to :meth:`send` has no
side effects besides the HTTP request itself; logging the outcome in the
``sms_logs`` table is the pipeline's job.
"""
from __future__ import annotations

import logging
import re
import time
from typing import Any, Callable, Optional

import httpx

from ..core.enums import SMSStatus
from .model import SMSSendResult
from .settings import SMSSettings

logger = logging.getLogger(__name__)

_MOBILE_RE = re.compile(r"^639\d{9}$")


def normalize_mobile_number(value: Optional[str]) -> Optional[str]:
    """Normalize PH mobile numbers to ``639XXXXXXXXX``.

    Accepts ``09XXXXXXXXX``, ``+639XXXXXXXXX``, ``639XXXXXXXXX`` and
    ``9XXXXXXXXX`` with spaces or dashes. Anything else comes back as None.
    """
    if not value:
        return None

    digits = re.sub(r"[^\d+]", "", str(value).strip())
    if digits.startswith("+"):
        digits = digits[1:]

    if digits.startswith("09") and len(digits) == 11:
        digits = "63" + digits[1:]
    elif digits.startswith("9") and len(digits) == 10:
        digits = "63" + digits

    return digits if _MOBILE_RE.match(digits) else None


def is_valid_mobile_number(value: Optional[str]) -> bool:
    return bool(value) and bool(_MOBILE_RE.match(value))


def _extract_message_id(data: Any) -> Optional[str]:
    if not data:
        return None
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        for key in ("uid", "message_id", "id"):
            if data.get(key):
                return str(data[key])
    return None


class SMSDeliveryClient:
    def __init__(
        self,
        settings: SMSSettings,
        *,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._settings = settings
        self._transport = transport
        self._sleep = sleep

    @property
    def settings(self) -> SMSSettings:
        return self._settings

    def send(self, mobile_number: str, message: str) -> SMSSendResult:
        if not is_valid_mobile_number(mobile_number):
            return SMSSendResult(
                success=False,
                status=SMSStatus.FAILED,
                error="Invalid mobile number format. Expected: 639XXXXXXXXX",
            )

        if not message or not message.strip():
            return SMSSendResult(success=False, status=SMSStatus.FAILED, error="Message content is empty")

        if not self._settings.enabled:
            logger.info("SMS disabled, skipping send to %s", mobile_number)
            return SMSSendResult(success=False, status=SMSStatus.FAILED, error="SMS service is disabled")

        if self._settings.mock_mode:
            return self._mock_send(mobile_number, message)

        total_attempts = 1 + self._settings.retry_attempts
        last_error = ""
        last_response: Any = None

        for attempt in range(1, total_attempts + 1):
            if attempt > 1:
                logger.info("Retry attempt %s for %s", attempt - 1, mobile_number)
                self._sleep(self._settings.retry_delay_seconds)

            result = self._post(mobile_number, message, attempt)
            if result.success:
                logger.info("SMS sent to %s", mobile_number)
                return result

            last_error = result.error or "Unknown error"
            last_response = result.provider_response
            logger.warning("SMS attempt %s/%s to %s failed: %s", attempt, total_attempts, mobile_number, last_error)

        logger.error("Failed to send SMS to %s after %s attempts", mobile_number, total_attempts)
        return SMSSendResult(
            success=False,
            status=SMSStatus.FAILED,
            provider_response=last_response,
            error=last_error,
            attempts=total_attempts,
        )

    def _post(self, mobile_number: str, message: str, attempt: int) -> SMSSendResult:
        payload = {
            "recipient": mobile_number,
            "sender_id": self._settings.sender_id,
            "type": "plain",
            "message": message,
        }
        headers = {
            "Authorization": f"Bearer {self._settings.api_token}",
            "Accept": "application/json",
        }

        try:
            with httpx.Client(timeout=self._settings.timeout_seconds, transport=self._transport) as c:
                r = c.post(self._settings.api_url, json=payload, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            body = _safe_json(e.response)
            error = body.get("message") if isinstance(body, dict) and body.get("message") else (
                f"API Error: {e.response.status_code} {e.response.reason_phrase}"
            )
            return SMSSendResult(success=False, status=SMSStatus.FAILED, provider_response=body, error=error, attempts=attempt)
        except httpx.HTTPError as e:
            return SMSSendResult(success=False, status=SMSStatus.FAILED, error=f"Network error: {e}", attempts=attempt)
        except ValueError:
            return SMSSendResult(success=False, status=SMSStatus.FAILED, error="Invalid JSON from provider", attempts=attempt)

        if isinstance(data, dict) and data.get("status") == "success":
            return SMSSendResult(
                success=True,
                status=SMSStatus.SENT,
                message_id=_extract_message_id(data.get("data")),
                provider_response=data,
                attempts=attempt,
            )

        error = data.get("message") if isinstance(data, dict) else None
        return SMSSendResult(
            success=False,
            status=SMSStatus.FAILED,
            provider_response=data,
            error=error or "API returned error status",
            attempts=attempt,
        )

    def _mock_send(self, mobile_number: str, message: str) -> SMSSendResult:
        logger.info("[MOCK SMS] to=%s from=%s message=%s", mobile_number, self._settings.sender_id, message)
        return SMSSendResult(
            success=True,
            status=SMSStatus.MOCK,
            message_id=f"mock_{int(time.time() * 1000)}",
            provider_response={"status": "mock", "message": "Mock mode - SMS not actually sent"},
            attempts=1,
        )

    def status(self) -> dict:
        return {
            "enabled": self._settings.enabled,
            "mock_mode": self._settings.mock_mode,
            "sender_id": self._settings.sender_id,
            "retry_attempts": self._settings.retry_attempts,
            "retry_delay_seconds": self._settings.retry_delay_seconds,
            "configured": bool(self._settings.api_token),
        }


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
