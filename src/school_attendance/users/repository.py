from __future__ import annotations

from typing import Optional, Protocol

from .model import Caller


class UserRepository(Protocol):
    """Read-only access to signed-in users.

    Accounts are managed by the identity provider, not by this app.
    """

    def get_active_by_id(self, user_id: int) -> Optional[Caller]:
        raise NotImplementedError
