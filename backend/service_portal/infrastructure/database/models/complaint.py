"""SQLAlchemy ORM model for the Complaint entity."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from service_portal.infrastructure.database.base import Base


class ComplaintModel(Base):
    """ORM model — maps to the 'complaints' table."""

    __tablename__ = "complaints"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    equipment_model: Mapped[str] = mapped_column(String(200), nullable=False)
    issue_type: Mapped[str] = mapped_column(String(20), nullable=False)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    company_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_complaints_user_created", "user_id", "created_at"),
        Index("ix_complaints_created", "created_at"),
        CheckConstraint(
            "status IN ('pending', 'in-progress', 'completed', 'cancelled')",
            name="status_valid",
        ),
    )

    def __repr__(self) -> str:
        return f"<ComplaintModel(id={self.id}, status='{self.status}')>"
