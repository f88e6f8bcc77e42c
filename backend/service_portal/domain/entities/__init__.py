from .complaint import (
    Complaint,
    ComplaintDraft,
    ComplaintPatch,
    ComplaintStatus,
    IssueCategory,
    OwnerContact,
    Priority,
)
from .scope import ComplaintCounts, ScopedView, StatusFilter, ViewerScope
from .user import SessionContext, User, UserRole

__all__ = [
    "Complaint",
    "ComplaintDraft",
    "ComplaintPatch",
    "ComplaintStatus",
    "IssueCategory",
    "OwnerContact",
    "Priority",
    "ComplaintCounts",
    "ScopedView",
    "StatusFilter",
    "ViewerScope",
    "SessionContext",
    "User",
    "UserRole",
]
