"""SQLAlchemy ORM model for portal user profiles."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from service_portal.infrastructure.database.base import Base


class UserModel(Base):
    """ORM model — maps to the 'users' table. Ids come from the identity provider."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="customer")

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, role='{self.role}')>"
