from __future__ import annotations

from datetime import time

from .base import LatenessDecision, LatenessStrategy


class OnTimeStrategy(LatenessStrategy):
    """Arrived before the start time or inside the grace period."""

    def decide_time_in(self, *, time_in: time, school_start: time, grace_seconds: int) -> LatenessDecision:
        return LatenessDecision(is_late=False, late_minutes=0)
