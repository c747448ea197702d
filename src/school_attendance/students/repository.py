from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Lookups only ever see students that are not soft-deleted."""

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_qr_secret(self, qr_secret: str) -> Optional[Student]:
        raise NotImplementedError

    def list_active_qr_secrets(self) -> Sequence[str]:
        raise NotImplementedError

    def list_by_adviser(self, adviser_id: int) -> Sequence[Student]:
        raise NotImplementedError
