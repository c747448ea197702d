from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class LatenessDecision:
    is_late: bool
    late_minutes: int = 0


class LatenessStrategy(ABC):
    """Strategy Pattern: encapsulate how a time-in is classified."""

    @abstractmethod
    def decide_time_in(self, *, time_in: time, school_start: time, grace_seconds: int) -> LatenessDecision:
        raise NotImplementedError


def seconds_of_day(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second
