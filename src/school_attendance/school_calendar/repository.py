from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CalendarException


class CalendarRepository(Protocol):
    def get_for_date(self, calendar_date: date) -> Optional[CalendarException]:
        raise NotImplementedError

    def list_between(self, start_date: date, end_date: date) -> Sequence[CalendarException]:
        raise NotImplementedError
