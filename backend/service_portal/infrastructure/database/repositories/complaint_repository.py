"""SQLAlchemy repository for complaints, bound to one AsyncSession."""

from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from service_portal.domain.entities import (
    Complaint,
    ComplaintPatch,
    ComplaintStatus,
    IssueCategory,
    OwnerContact,
    Priority,
)
from service_portal.domain.exceptions import ConflictError
from service_portal.infrastructure.database.models import ComplaintModel, UserModel


def _as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; everything stored is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLAlchemyComplaintRepository:
    """Maps between ComplaintModel rows and Complaint entities."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ComplaintModel, user: UserModel | None = None) -> Complaint:
        """Map ORM model → domain entity."""
        owner = None
        if user is not None:
            owner = OwnerContact(name=user.name or None, email=user.email, phone=user.phone or None)
        return Complaint(
            id=model.id,
            owner_id=model.user_id,
            equipment_model=model.equipment_model,
            category=IssueCategory(model.issue_type),
            priority=Priority(model.priority),
            description=model.description,
            status=ComplaintStatus(model.status),
            staff_notes=model.company_notes,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
            owner=owner,
        )

    def _to_model(self, entity: Complaint) -> ComplaintModel:
        """Map domain entity → ORM model (for creation)."""
        return ComplaintModel(
            id=entity.id,
            user_id=entity.owner_id,
            equipment_model=entity.equipment_model,
            issue_type=entity.category.value,
            priority=entity.priority.value,
            description=entity.description,
            status=entity.status.value,
            company_notes=entity.staff_notes,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get_by_id(self, complaint_id: str, *, with_owner: bool = False) -> Complaint | None:
        if not with_owner:
            model = await self._session.get(ComplaintModel, complaint_id)
            return self._to_entity(model) if model else None
        stmt = (
            select(ComplaintModel, UserModel)
            .outerjoin(UserModel, UserModel.id == ComplaintModel.user_id)
            .where(ComplaintModel.id == complaint_id)
        )
        row = (await self._session.execute(stmt)).first()
        return self._to_entity(row[0], row[1]) if row else None

    async def get_all(self, *, owner_id: str | None = None, with_owner: bool = False) -> list[Complaint]:
        """List complaints newest first, optionally for one owner and joined with contact info."""
        if with_owner:
            stmt = select(ComplaintModel, UserModel).outerjoin(
                UserModel, UserModel.id == ComplaintModel.user_id
            )
        else:
            stmt = select(ComplaintModel)
        if owner_id is not None:
            stmt = stmt.where(ComplaintModel.user_id == owner_id)
        stmt = stmt.order_by(ComplaintModel.created_at.desc(), ComplaintModel.id)

        result = await self._session.execute(stmt)
        if with_owner:
            return [self._to_entity(model, user) for model, user in result.all()]
        return [self._to_entity(model) for model in result.scalars().all()]

    async def create(self, complaint: Complaint) -> Complaint:
        model = self._to_model(complaint)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def save(self, complaint: Complaint, patch: ComplaintPatch) -> Complaint:
        """Write only the columns ``patch`` touched, plus ``updated_at``.

        Columns outside the patch keep whatever a concurrent writer committed.
        """
        values: dict[str, object] = {"updated_at": complaint.updated_at}
        if patch.status is not None:
            values["status"] = complaint.status.value
        if patch.notes is not None:
            values["company_notes"] = complaint.staff_notes

        result = await self._session.execute(
            update(ComplaintModel)
            .where(ComplaintModel.id == complaint.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ConflictError(complaint.id, "record disappeared before write")

        model = await self._session.get(ComplaintModel, complaint.id, populate_existing=True)
        if model is None:
            raise ConflictError(complaint.id, "record disappeared during write")
        return self._to_entity(model)
