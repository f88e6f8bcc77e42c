"""Domain entities for portal users and the authenticated session context."""

from dataclasses import dataclass
from enum import Enum

from service_portal.domain.entities.scope import ViewerScope


class UserRole(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"

    @classmethod
    def parse(cls, raw: str | None) -> "UserRole":
        """Resolve a stored role value. Unknown values fall back to customer."""
        value = (raw or "").strip().lower()
        if value in ("staff", "company"):
            return cls.STAFF
        return cls.CUSTOMER


@dataclass
class User:
    """A portal account as stored in the ``users`` table."""

    id: str
    email: str
    name: str = ""
    phone: str = ""
    role: UserRole = UserRole.CUSTOMER


@dataclass(frozen=True)
class SessionContext:
    """Explicit authenticated context handed to every controller and workflow.

    Created after a successful sign-in (or token restore) and discarded on
    sign-out. Never shared implicitly between scopes.
    """

    user_id: str
    role: UserRole
    email: str = ""
    display_name: str = ""
    access_token: str = ""

    @property
    def is_staff(self) -> bool:
        return self.role is UserRole.STAFF

    @property
    def scope(self) -> ViewerScope:
        return ViewerScope(user_id=self.user_id, is_staff=self.is_staff)
