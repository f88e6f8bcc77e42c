from .complaint_store import ChangeListener, ComplaintStore, Subscription
from .identity_provider import AuthSession, IdentityProvider, SessionEvent, SessionListener
from .user_repository import UserRepository

__all__ = [
    "ChangeListener",
    "ComplaintStore",
    "Subscription",
    "AuthSession",
    "IdentityProvider",
    "SessionEvent",
    "SessionListener",
    "UserRepository",
]
