from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .strategies.base import LatenessStrategy, seconds_of_day
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class LatenessStrategyFactory:
    """Factory Pattern: choose the lateness strategy for a time-in."""

    def for_time_in(self, *, time_in: time, school_start: time, grace_seconds: int) -> LatenessStrategy:
        # Time-of-day comparison only; the grace boundary itself is on time.
        if seconds_of_day(time_in) <= seconds_of_day(school_start) + int(grace_seconds):
            return OnTimeStrategy()
        return LateStrategy()
