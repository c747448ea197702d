from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol

from .model import Quarter


class QuarterRepository(Protocol):
    def get_for_date(self, day: date) -> Optional[Quarter]:
        raise NotImplementedError

    def update_school_start_time(self, quarter_id: int, school_start_time: time) -> bool:
        raise NotImplementedError
