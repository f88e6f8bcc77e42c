"""Change feed — in-process broadcaster of "complaints changed" signals."""

import logging
from dataclasses import dataclass

from service_portal.application.interfaces import ChangeListener, Subscription
from service_portal.domain.entities import ViewerScope

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class _Registration:
    scope: ViewerScope
    listener: ChangeListener


class ChangeFeed:
    """Fans complaint create/update signals out to scoped listeners.

    Each subscription is a (scope, listener) pair. Publishing notifies every
    listener whose scope includes the complaint's owner: customers hear
    about their own complaints only, staff hear about all of them. Signals
    carry no payload; listeners re-fetch.
    """

    def __init__(self) -> None:
        self._registrations: list[_Registration] = []

    def subscribe(self, scope: ViewerScope, listener: ChangeListener) -> Subscription:
        registration = _Registration(scope=scope, listener=listener)
        self._registrations.append(registration)
        logger.debug("Change feed subscription opened for %s", scope)

        def release() -> None:
            if registration in self._registrations:
                self._registrations.remove(registration)
                logger.debug("Change feed subscription closed for %s", scope)

        return Subscription(release)

    def publish(self, owner_id: str, complaint_id: str, kind: str) -> int:
        """Notify listeners in scope of ``owner_id``. Returns how many were notified."""
        notified = 0
        for registration in list(self._registrations):
            if not registration.scope.includes(owner_id):
                continue
            try:
                registration.listener()
                notified += 1
            except Exception:
                logger.exception(
                    "Change listener failed for %s (%s %s)", registration.scope, kind, complaint_id
                )
        logger.debug("Published %s for complaint %s to %d listener(s)", kind, complaint_id, notified)
        return notified

    def shutdown(self) -> None:
        """Drop every registration."""
        self._registrations.clear()

    @property
    def listener_count(self) -> int:
        return len(self._registrations)
