from __future__ import annotations

from datetime import time

from .base import LatenessDecision, LatenessStrategy, seconds_of_day


class LateStrategy(LatenessStrategy):
    """Late time-in.

    Minutes are counted from the school start time, not from the end of the
    grace period; whole minutes only.
    """

    def decide_time_in(self, *, time_in: time, school_start: time, grace_seconds: int) -> LatenessDecision:
        over = seconds_of_day(time_in) - seconds_of_day(school_start)
        return LatenessDecision(is_late=True, late_minutes=max(over, 0) // 60)
