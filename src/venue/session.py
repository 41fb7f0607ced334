"""
Session slot: the bearer credential shared by every outgoing request.

Written only by the login/logout collaborator. The trading core reads it
through a provider callable and never mutates it.
"""

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Session:
    token: str
    account_id: str | None = None


SessionProvider = Callable[[], "Session | None"]


class SessionSlot:
    """Holds the current Session (or None when logged out)."""

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    def current(self) -> Session | None:
        return self._session

    def set(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None and bool(self._session.token)
