"""Domain entity — a customer-submitted equipment service complaint."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Mapping
from uuid import uuid4

from service_portal.domain.exceptions import ValidationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _ParseableEnum(str, Enum):
    """String enum that converts raw input into members or a ValidationError."""

    @classmethod
    def parse(cls, raw: "str | _ParseableEnum", field_name: str):
        if isinstance(raw, cls):
            return raw
        value = (raw or "").strip().lower() if isinstance(raw, str) else raw
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(field_name, f"'{raw}' is not one of: {allowed}") from None


class ComplaintStatus(_ParseableEnum):
    """Lifecycle states of a complaint."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]


class Priority(_ParseableEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return _PRIORITY_LABELS[self]

    @property
    def color(self) -> str:
        return _PRIORITY_COLORS[self]


class IssueCategory(_ParseableEnum):
    BATTERY = "battery"
    MOTOR = "motor"
    BRAKES = "brakes"
    ELECTRICAL = "electrical"
    MECHANICAL = "mechanical"
    DISPLAY = "display"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


# ── Display metadata ─────────────────────────────────────────────────

_STATUS_LABELS: dict[ComplaintStatus, str] = {
    ComplaintStatus.PENDING: "Pending",
    ComplaintStatus.IN_PROGRESS: "In Progress",
    ComplaintStatus.COMPLETED: "Completed",
    ComplaintStatus.CANCELLED: "Cancelled",
}

_STATUS_COLORS: dict[ComplaintStatus, str] = {
    ComplaintStatus.PENDING: "#f59e0b",
    ComplaintStatus.IN_PROGRESS: "#3b82f6",
    ComplaintStatus.COMPLETED: "#10b981",
    ComplaintStatus.CANCELLED: "#ef4444",
}

_PRIORITY_LABELS: dict[Priority, str] = {
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
}

_PRIORITY_COLORS: dict[Priority, str] = {
    Priority.LOW: "#10b981",
    Priority.MEDIUM: "#f59e0b",
    Priority.HIGH: "#ef4444",
}

_CATEGORY_LABELS: dict[IssueCategory, str] = {
    IssueCategory.BATTERY: "Battery Issue",
    IssueCategory.MOTOR: "Motor Problem",
    IssueCategory.BRAKES: "Brake System",
    IssueCategory.ELECTRICAL: "Electrical System",
    IssueCategory.MECHANICAL: "Mechanical Issue",
    IssueCategory.DISPLAY: "Display/Controls",
    IssueCategory.OTHER: "Other",
}


def _require_exhaustive(enum_cls: type[Enum], mapping: Mapping, name: str) -> None:
    missing = [m.value for m in enum_cls if m not in mapping]
    if missing:
        raise RuntimeError(f"{name} is missing entries for: {', '.join(missing)}")


_require_exhaustive(ComplaintStatus, _STATUS_LABELS, "status labels")
_require_exhaustive(ComplaintStatus, _STATUS_COLORS, "status colors")
_require_exhaustive(Priority, _PRIORITY_LABELS, "priority labels")
_require_exhaustive(Priority, _PRIORITY_COLORS, "priority colors")
_require_exhaustive(IssueCategory, _CATEGORY_LABELS, "category labels")


# ── Value objects ────────────────────────────────────────────────────

@dataclass
class ComplaintDraft:
    """Raw customer input for a new complaint, as entered in the form."""

    equipment_model: str = ""
    category: str = ""
    description: str = ""
    priority: str = Priority.MEDIUM.value

    def validated(self) -> tuple[str, IssueCategory, Priority, str]:
        """Return normalized (model, category, priority, description) or raise ValidationError."""
        model = (self.equipment_model or "").strip()
        if not model:
            raise ValidationError("equipment_model", "must not be empty")
        description = (self.description or "").strip()
        if not description:
            raise ValidationError("description", "must not be empty")
        category = IssueCategory.parse(self.category, "category")
        priority = Priority.parse(self.priority, "priority")
        return model, category, priority, description


@dataclass
class ComplaintPatch:
    """Partial mutation accepted by the store. ``None`` leaves a field untouched."""

    status: ComplaintStatus | None = None
    notes: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.status is None and self.notes is None


@dataclass(frozen=True)
class OwnerContact:
    """Submitter contact details joined into the staff view."""

    name: str | None
    email: str | None
    phone: str | None


# ── Entity ───────────────────────────────────────────────────────────

@dataclass
class Complaint:
    """Core domain entity for a service complaint.

    ``owner_id`` and ``created_at`` are fixed at construction; status and
    notes change only through :meth:`change_status` and :meth:`annotate`,
    both of which advance ``updated_at``.
    """

    owner_id: str
    equipment_model: str
    category: IssueCategory
    priority: Priority
    description: str
    id: str = field(default_factory=lambda: str(uuid4()))
    status: ComplaintStatus = ComplaintStatus.PENDING
    staff_notes: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None
    owner: OwnerContact | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None or self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @classmethod
    def open(cls, draft: ComplaintDraft, owner_id: str) -> "Complaint":
        """Create a new pending complaint from validated draft input."""
        if not owner_id:
            raise ValidationError("owner_id", "must not be empty")
        model, category, priority, description = draft.validated()
        now = _utcnow()
        return cls(
            owner_id=owner_id,
            equipment_model=model,
            category=category,
            priority=priority,
            description=description,
            status=ComplaintStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    def change_status(self, new_status: ComplaintStatus) -> ComplaintStatus:
        """Set the status and refresh ``updated_at``. Returns the previous status."""
        previous = self.status
        self.status = new_status
        self._touch()
        return previous

    def annotate(self, notes: str) -> None:
        """Replace the staff notes. Blank notes clear the field."""
        self.staff_notes = notes.strip() or None
        self._touch()

    def _touch(self) -> None:
        # updated_at strictly increases on each mutation and never precedes created_at
        now = _utcnow()
        floor = max(self.created_at, self.updated_at)
        if now <= floor:
            now = floor + timedelta(microseconds=1)
        self.updated_at = now
