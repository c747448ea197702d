from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import CalendarDayKind


@dataclass(frozen=True)
class CalendarException:
    """Explicit override of the weekday rule for one date."""

    calendar_date: date
    is_school_day: bool
    kind: CalendarDayKind = CalendarDayKind.HOLIDAY
    title: str = ""
