"""Abstract identity provider interface (port) — hosted authentication service."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


@dataclass(frozen=True)
class AuthSession:
    """Authenticated session as returned by the provider."""

    user_id: str
    email: str
    access_token: str
    refresh_token: str = ""


SessionListener = Callable[[SessionEvent, AuthSession | None], None]


class IdentityProvider(ABC):
    """Port for the external identity provider.

    Concrete adapters implement the four network operations; the session
    transition stream is shared by all adapters.
    """

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session. Raises AuthenticationError."""
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> str:
        """Register a new identity and return its user id."""
        ...

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """Revoke the given session."""
        ...

    @abstractmethod
    async def get_session(self, access_token: str) -> AuthSession:
        """Resolve an access token to its session. Raises AuthenticationError."""
        ...

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for sign-in / sign-out transitions. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: SessionEvent, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Session listener failed for %s", event.value)
