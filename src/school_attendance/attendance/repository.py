from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Protocol, Set, Tuple

from ..late_tracking.model import LateMinutesUpdate, LateTally
from .model import AttendanceLog


class AttendanceRepository(Protocol):
    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def create_time_in(
        self,
        *,
        student_id: int,
        attendance_date: date,
        time_in: time,
        is_late: bool,
        late_minutes: int,
        late: Optional[LateMinutesUpdate] = None,
    ) -> Tuple[AttendanceLog, Optional[LateTally]]:
        """Insert the day's row; raises DuplicateScanError if one already exists.

        When ``late`` is given the quarter total is updated in the same
        transaction, so either both writes land or neither does.
        """
        raise NotImplementedError

    def update_time_in(
        self,
        *,
        log_id: int,
        time_in: time,
        is_late: bool,
        late_minutes: int,
        late: Optional[LateMinutesUpdate] = None,
    ) -> Optional[LateTally]:
        """Fill time_in on a pre-existing row, with the same ``late`` contract.

        Raises DuplicateScanError if time_in was already set.
        """
        raise NotImplementedError

    def set_time_out(self, *, log_id: int, time_out: time) -> bool:
        """Set time_out only while it is still empty; False otherwise."""
        raise NotImplementedError

    def list_dates_with_time_in(self, student_id: int, dates: Iterable[date]) -> Set[date]:
        raise NotImplementedError
