from __future__ import annotations

from typing import Optional, Protocol

from .model import LateTally, QuarterLateTracking


class LateTrackingRepository(Protocol):
    def add_late_minutes(self, *, student_id: int, quarter_id: int, minutes: int, threshold: int) -> LateTally:
        """Atomically add minutes and test-and-set the notification flag.

        Implementations must do the read-modify-write as one storage-level
        operation so concurrent scans can neither lose minutes nor both
        observe the crossing.
        """
        raise NotImplementedError

    def get(self, *, student_id: int, quarter_id: int) -> Optional[QuarterLateTracking]:
        raise NotImplementedError
