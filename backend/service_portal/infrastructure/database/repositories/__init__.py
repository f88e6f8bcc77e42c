from .complaint_repository import SQLAlchemyComplaintRepository
from .user_repository import SQLAlchemyUserRepository

__all__ = [
    "SQLAlchemyComplaintRepository",
    "SQLAlchemyUserRepository",
]
