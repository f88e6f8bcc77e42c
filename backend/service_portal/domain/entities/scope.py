"""Value objects describing what a viewer may see and what is rendered for them."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from service_portal.domain.entities.complaint import Complaint, ComplaintStatus


@dataclass(frozen=True)
class ViewerScope:
    """Visibility boundary of a viewer: customers see their own complaints, staff see all."""

    user_id: str
    is_staff: bool = False

    @property
    def owner_filter(self) -> str | None:
        """Owner id to filter on, or ``None`` for the unrestricted staff scope."""
        return None if self.is_staff else self.user_id

    def includes(self, owner_id: str) -> bool:
        return self.is_staff or owner_id == self.user_id

    def __str__(self) -> str:
        return "staff" if self.is_staff else f"customer:{self.user_id}"


class StatusFilter(str, Enum):
    """Status filter exposed on the staff view."""

    ALL = "all"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: "str | StatusFilter | None") -> "StatusFilter":
        """Lenient parse — anything unrecognized behaves as ``all``."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.ALL

    def matches(self, status: ComplaintStatus) -> bool:
        return self is StatusFilter.ALL or self.value == status.value


@dataclass(frozen=True)
class ComplaintCounts:
    """Aggregate counts over a scope's full (unfiltered) record set."""

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0


@dataclass(frozen=True)
class ScopedView:
    """What the presentation layer renders for one active view."""

    complaints: tuple[Complaint, ...] = ()
    counts: ComplaintCounts = field(default_factory=ComplaintCounts)
    status_filter: StatusFilter = StatusFilter.ALL
    loading: bool = False
    error: str | None = None
    last_refreshed_at: datetime | None = None
    refresh_count: int = 0
