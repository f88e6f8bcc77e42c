"""Abstract store interface (port) for complaint persistence and change notification."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from service_portal.domain.entities import (
    Complaint,
    ComplaintDraft,
    ComplaintPatch,
    UserRole,
    ViewerScope,
)

ChangeListener = Callable[[], None]


class Subscription:
    """Cancellation handle returned by :meth:`ComplaintStore.subscribe`.

    ``cancel()`` releases the listener synchronously and may be called
    more than once.
    """

    def __init__(self, release: Callable[[], None]):
        self._release: Callable[[], None] | None = release

    @property
    def active(self) -> bool:
        return self._release is not None

    def cancel(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()


class ComplaintStore(ABC):
    """Port for complaint persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def create(self, draft: ComplaintDraft, owner_id: str) -> Complaint:
        """Validate and persist a new pending complaint owned by ``owner_id``."""
        ...

    @abstractmethod
    async def list(self, scope: ViewerScope) -> list[Complaint]:
        """Return the complaints visible to ``scope``, newest first."""
        ...

    @abstractmethod
    async def get(self, complaint_id: str) -> Complaint:
        """Return a single complaint or raise NotFoundError."""
        ...

    @abstractmethod
    async def update(
        self,
        complaint_id: str,
        patch: ComplaintPatch,
        actor_role: UserRole,
    ) -> Complaint:
        """Apply ``patch`` through the lifecycle rules and return the stored record."""
        ...

    @abstractmethod
    def subscribe(self, scope: ViewerScope, on_change: ChangeListener) -> Subscription:
        """Register ``on_change`` for creates/updates within ``scope``."""
        ...
