# src/cookbook/services/session.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class SessionProvider(ABC):
    """Supplies the acting user's id; None when nobody is signed in."""

    @abstractmethod
    def current_user_id(self) -> Optional[str]:
        pass

    @property
    def is_authenticated(self) -> bool:
        return self.current_user_id() is not None


class StaticSession(SessionProvider):
    """Session bound to a user already resolved for the current request."""

    def __init__(self, user_id: Optional[str]):
        self._user_id = user_id

    def current_user_id(self) -> Optional[str]:
        return self._user_id
