from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time


@dataclass(frozen=True)
class Quarter:
    """Grading period with its own school start time."""

    id: int
    quarter_name: str
    start_date: date
    end_date: date
    school_start_time: time

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "quarter_id": self.id,
            "quarter_name": self.quarter_name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "school_start_time": self.school_start_time.strftime("%H:%M:%S"),
        }
