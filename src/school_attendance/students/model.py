from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Student reference data (read-only to the attendance core)."""

    id: int
    student_code: str
    qr_secret: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    level_id: Optional[int] = None
    specialization_id: Optional[int] = None
    section_id: Optional[int] = None
    adviser_id: Optional[int] = None
    mobile_number: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_public_dict(self) -> dict:
        # Never expose qr_secret.
        return {
            "id": self.id,
            "student_id": self.student_code,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "middle_name": self.middle_name,
            "level_id": self.level_id,
            "specialization_id": self.specialization_id,
            "section_id": self.section_id,
            "adviser_id": self.adviser_id,
        }
