from .auth import SessionResponse, SignInRequest, SignUpRequest, UserResponse
from .complaint import (
    ComplaintCountsResponse,
    ComplaintResponse,
    ComplaintSubmit,
    NotesUpdate,
    OwnerContactResponse,
    ScopedViewResponse,
    StatusUpdate,
)

__all__ = [
    "SessionResponse",
    "SignInRequest",
    "SignUpRequest",
    "UserResponse",
    "ComplaintCountsResponse",
    "ComplaintResponse",
    "ComplaintSubmit",
    "NotesUpdate",
    "OwnerContactResponse",
    "ScopedViewResponse",
    "StatusUpdate",
]
