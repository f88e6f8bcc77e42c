"""Concrete repository implementation for User backed by SQLAlchemy."""

from sqlalchemy.ext.asyncio import AsyncSession

from service_portal.application.interfaces import UserRepository
from service_portal.domain.entities import User, UserRole
from service_portal.infrastructure.database.models import UserModel


class SQLAlchemyUserRepository(UserRepository):
    """Implements the UserRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            name=model.name,
            phone=model.phone,
            role=UserRole.parse(model.role),
        )

    async def get_by_id(self, user_id: str) -> User | None:
        model = await self._session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    async def create(self, user: User) -> User:
        model = UserModel(
            id=user.id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            role=user.role.value,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)
