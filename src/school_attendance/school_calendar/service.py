from __future__ import annotations

from datetime import date, timedelta

from ..core.constants import DEFAULT_ABSENCE_LOOKBACK_DAYS
from .repository import CalendarRepository


class SchoolCalendar:
    """Answers "is this a school day": explicit calendar rows win, else Mon-Fri."""

    def __init__(self, exceptions: CalendarRepository):
        self._exceptions = exceptions

    @staticmethod
    def _weekday_rule(day: date) -> bool:
        return day.weekday() < 5  # Monday=0 ... Friday=4

    def is_school_day(self, day: date) -> bool:
        override = self._exceptions.get_for_date(day)
        if override is not None:
            return override.is_school_day
        return self._weekday_rule(day)

    def previous_school_days(
        self, before: date, count: int, *, max_lookback: int = DEFAULT_ABSENCE_LOOKBACK_DAYS
    ) -> list[date]:
        """The ``count`` most recent school days strictly before ``before``, newest first.

        Returns fewer than ``count`` days when the lookback window runs out.
        """
        if count <= 0:
            return []

        window_start = before - timedelta(days=max_lookback)
        overrides = {
            e.calendar_date: e.is_school_day
            for e in self._exceptions.list_between(window_start, before - timedelta(days=1))
        }

        days: list[date] = []
        day = before - timedelta(days=1)
        while day >= window_start and len(days) < count:
            if overrides.get(day, self._weekday_rule(day)):
                days.append(day)
            day -= timedelta(days=1)
        return days
