"""Which RSVPs the current guest is allowed to cancel.

There are no guest accounts. When a guest RSVPs, the new RSVP's token is
remembered in their session under the event's public hash; holding the token in
that session is what entitles them to cancel it later.
"""

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Any

from fastapi import Request


class GuestIdentityStore(ABC):
    @abstractmethod
    def tokens(self, event_key: str) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def record(self, event_key: str, token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def revoke(self, event_key: str, token: str) -> None:
        raise NotImplementedError

    def contains(self, event_key: str, token: str) -> bool:
        return token in self.tokens(event_key)


class SessionGuestIdentityStore(GuestIdentityStore):
    """Backed by a session mapping, e.g. Starlette's signed-cookie ``request.session``.

    Values are stored as JSON lists since the session is serialized to a cookie.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def tokens(self, event_key: str) -> list[str]:
        stored = self._session.get(event_key) or []
        return [str(token) for token in stored]

    def record(self, event_key: str, token: str) -> None:
        tokens = self.tokens(event_key)
        if token not in tokens:
            tokens.append(token)
        # reassign so the session notices the change
        self._session[event_key] = tokens

    def revoke(self, event_key: str, token: str) -> None:
        tokens = [t for t in self.tokens(event_key) if t != token]
        if tokens:
            self._session[event_key] = tokens
        else:
            self._session.pop(event_key, None)


class InMemoryGuestIdentityStore(GuestIdentityStore):
    def __init__(self) -> None:
        self._tokens: dict[str, list[str]] = {}

    def tokens(self, event_key: str) -> list[str]:
        return list(self._tokens.get(event_key, []))

    def record(self, event_key: str, token: str) -> None:
        tokens = self._tokens.setdefault(event_key, [])
        if token not in tokens:
            tokens.append(token)

    def revoke(self, event_key: str, token: str) -> None:
        tokens = self._tokens.get(event_key, [])
        if token in tokens:
            tokens.remove(token)


def get_identity_store(request: Request) -> GuestIdentityStore:
    """Dependency returning the identity store of the requesting guest."""
    return SessionGuestIdentityStore(request.session)
