"""Pydantic DTOs (Data Transfer Objects) for the complaint feature."""

from datetime import datetime

from pydantic import BaseModel, Field

from service_portal.domain.entities import Complaint, ComplaintDraft, ScopedView


class ComplaintSubmit(BaseModel):
    """Schema for submitting a new complaint. Field rules are enforced by the domain."""

    equipment_model: str = Field(..., max_length=200, examples=["EV-Sport 2024"])
    category: str = Field(..., examples=["battery"])
    priority: str = Field("medium", examples=["high"])
    description: str = Field(..., max_length=5000, examples=["Won't hold charge"])

    def to_draft(self) -> ComplaintDraft:
        return ComplaintDraft(
            equipment_model=self.equipment_model,
            category=self.category,
            priority=self.priority,
            description=self.description,
        )


class StatusUpdate(BaseModel):
    status: str = Field(..., examples=["in-progress"])


class NotesUpdate(BaseModel):
    notes: str = Field("", max_length=5000)


class OwnerContactResponse(BaseModel):
    name: str | None
    email: str | None
    phone: str | None


class ComplaintResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    owner_id: str
    equipment_model: str
    category: str
    category_label: str
    priority: str
    priority_color: str
    description: str
    status: str
    status_label: str
    status_color: str
    staff_notes: str | None
    created_at: datetime
    updated_at: datetime
    owner: OwnerContactResponse | None = None

    @classmethod
    def from_entity(cls, complaint: Complaint, *, include_owner: bool = False) -> "ComplaintResponse":
        owner = None
        if include_owner and complaint.owner is not None:
            owner = OwnerContactResponse(
                name=complaint.owner.name,
                email=complaint.owner.email,
                phone=complaint.owner.phone,
            )
        return cls(
            id=complaint.id,
            owner_id=complaint.owner_id,
            equipment_model=complaint.equipment_model,
            category=complaint.category.value,
            category_label=complaint.category.label,
            priority=complaint.priority.value,
            priority_color=complaint.priority.color,
            description=complaint.description,
            status=complaint.status.value,
            status_label=complaint.status.label,
            status_color=complaint.status.color,
            staff_notes=complaint.staff_notes,
            created_at=complaint.created_at,
            updated_at=complaint.updated_at,
            owner=owner,
        )


class ComplaintCountsResponse(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int


class ScopedViewResponse(BaseModel):
    """The rendered view for one viewer: list, counts, filter and flags."""

    complaints: list[ComplaintResponse]
    counts: ComplaintCountsResponse
    status_filter: str
    loading: bool
    error: str | None
    last_refreshed_at: datetime | None
    refresh_count: int

    @classmethod
    def from_view(cls, view: ScopedView, *, include_owner: bool = False) -> "ScopedViewResponse":
        return cls(
            complaints=[
                ComplaintResponse.from_entity(c, include_owner=include_owner)
                for c in view.complaints
            ],
            counts=ComplaintCountsResponse(
                total=view.counts.total,
                pending=view.counts.pending,
                in_progress=view.counts.in_progress,
                completed=view.counts.completed,
                cancelled=view.counts.cancelled,
            ),
            status_filter=view.status_filter.value,
            loading=view.loading,
            error=view.error,
            last_refreshed_at=view.last_refreshed_at,
            refresh_count=view.refresh_count,
        )
