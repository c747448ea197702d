from __future__ import annotations

import logging
from datetime import date, time

from ..core.exceptions import AuthorizationError, NoActiveQuarterError
from ..school_calendar.clock import SchoolClock
from ..users.model import AdminUser, Caller
from .model import Quarter
from .repository import QuarterRepository

logger = logging.getLogger(__name__)


class QuarterService:
    def __init__(self, quarters: QuarterRepository, clock: SchoolClock):
        self._quarters = quarters
        self._clock = clock

    def get_active(self, day: date | None = None) -> Quarter:
        """The quarter containing ``day`` (default: business date). No fallback."""
        day = day or self._clock.business_date()
        quarter = self._quarters.get_for_date(day)
        if quarter is None:
            raise NoActiveQuarterError()
        return quarter

    def update_school_start_time(self, caller: Caller, school_start_time: time) -> Quarter:
        if not isinstance(caller, AdminUser):
            raise AuthorizationError("Only administrators can change the school start time")

        quarter = self.get_active()
        new_time = school_start_time.replace(microsecond=0, tzinfo=None)
        if not self._quarters.update_school_start_time(quarter.id, new_time):
            raise NoActiveQuarterError()

        logger.info(
            "School start time for %s changed from %s to %s by user %s",
            quarter.quarter_name,
            quarter.school_start_time.isoformat(),
            new_time.isoformat(),
            caller.user_id,
        )
        return Quarter(
            id=quarter.id,
            quarter_name=quarter.quarter_name,
            start_date=quarter.start_date,
            end_date=quarter.end_date,
            school_start_time=new_time,
        )
