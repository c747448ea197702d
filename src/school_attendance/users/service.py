from __future__ import annotations

from typing import Optional

from ..core.exceptions import AuthenticationError
from .model import Caller
from .repository import UserRepository


class IdentityResolver:
    """Turns the session's user id into a typed caller."""

    def __init__(self, users: UserRepository):
        self._users = users

    def resolve(self, user_id: Optional[int]) -> Caller:
        if user_id is None:
            raise AuthenticationError("Access token required")
        caller = self._users.get_active_by_id(int(user_id))
        if caller is None:
            raise AuthenticationError("User not found or inactive")
        return caller
