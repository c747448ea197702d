from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..core.enums import Role


@dataclass(frozen=True)
class AdminUser:
    user_id: int
    full_name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class TeacherUser:
    """Homeroom teacher; students reference this id as their adviser."""

    user_id: int
    full_name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class StaffUser:
    user_id: int
    full_name: str
    position: Optional[str] = None


# Authenticated caller: exactly one of the role variants.
Caller = Union[AdminUser, TeacherUser, StaffUser]


def role_of(caller: Caller) -> Role:
    if isinstance(caller, AdminUser):
        return Role.ADMIN
    if isinstance(caller, TeacherUser):
        return Role.TEACHER
    if isinstance(caller, StaffUser):
        return Role.STAFF
    raise TypeError(f"Unknown caller type: {type(caller)!r}")


def caller_from_row(row: dict) -> Caller:
    """Build the role variant from a users row; the role column is parsed only here."""
    role = Role(row["role"])
    user_id = int(row["user_id"])
    full_name = row["full_name"]
    if role is Role.ADMIN:
        return AdminUser(user_id=user_id, full_name=full_name, email=row.get("email"))
    if role is Role.TEACHER:
        return TeacherUser(user_id=user_id, full_name=full_name, email=row.get("email"))
    if role is Role.STAFF:
        return StaffUser(user_id=user_id, full_name=full_name, position=row.get("position"))
    raise ValueError(f"Unhandled role: {role!r}")
