from __future__ import annotations

import logging

from ..core.exceptions import ValidationError
from .model import LateMinutesUpdate, LateTally
from .repository import LateTrackingRepository

logger = logging.getLogger(__name__)


class QuarterLateAccumulator:
    """Per student/quarter running late total with a one-shot notification flag."""

    def __init__(self, tracking: LateTrackingRepository, *, threshold_minutes: int):
        self._tracking = tracking
        self._threshold = int(threshold_minutes)

    @property
    def threshold_minutes(self) -> int:
        return self._threshold

    def prepare(self, student_id: int, quarter_id: int, minutes: int) -> LateMinutesUpdate:
        """Validate an update for a repository that applies it inside its own transaction."""
        if minutes < 0:
            raise ValidationError("Late minutes cannot be negative")
        return LateMinutesUpdate(
            student_id=int(student_id),
            quarter_id=int(quarter_id),
            minutes=int(minutes),
            threshold=self._threshold,
        )

    def applied(self, update: LateMinutesUpdate, tally: LateTally) -> LateTally:
        if tally.crossed_threshold:
            logger.info(
                "Student %s crossed the %s-minute late threshold in quarter %s (total %s)",
                update.student_id,
                update.threshold,
                update.quarter_id,
                tally.total_minutes,
            )
        return tally

    def add_late_minutes(self, student_id: int, quarter_id: int, minutes: int) -> LateTally:
        update = self.prepare(student_id, quarter_id, minutes)
        tally = self._tracking.add_late_minutes(
            student_id=update.student_id,
            quarter_id=update.quarter_id,
            minutes=update.minutes,
            threshold=update.threshold,
        )
        return self.applied(update, tally)

    def get_tally(self, student_id: int, quarter_id: int) -> LateTally:
        row = self._tracking.get(student_id=student_id, quarter_id=quarter_id)
        if row is None:
            return LateTally(total_minutes=0, crossed_threshold=False, notification_sent=False)
        return LateTally(
            total_minutes=row.total_late_minutes,
            crossed_threshold=False,
            notification_sent=row.notification_sent,
        )
