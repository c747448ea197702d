from __future__ import annotations

from typing import Protocol

from .model import SMSLog


class SMSLogRepository(Protocol):
    def create(self, log: SMSLog) -> int:
        raise NotImplementedError
