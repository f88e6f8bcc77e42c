from .base import Base
from .session import (
    engine,
    async_session_factory,
    create_engine_for,
    create_session_factory,
    get_db_session,
)
from .models import ComplaintModel, UserModel
from .complaint_store import SQLAlchemyComplaintStore

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "create_engine_for",
    "create_session_factory",
    "get_db_session",
    "ComplaintModel",
    "UserModel",
    "SQLAlchemyComplaintStore",
]
