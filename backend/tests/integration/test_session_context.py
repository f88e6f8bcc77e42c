"""Integration tests for bearer-token resolution against a real database session."""

import pytest
import pytest_asyncio
from fastapi import HTTPException

from service_portal.application.services import SessionService
from service_portal.domain.entities import User, UserRole
from service_portal.infrastructure.database import Base, create_engine_for, create_session_factory
from service_portal.infrastructure.database.repositories import SQLAlchemyUserRepository
from service_portal.infrastructure.dependencies import get_session_context
from tests.fakes import FakeIdentityProvider


@pytest_asyncio.fixture
async def db():
    engine = create_engine_for("sqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with create_session_factory(engine)() as session:
        await SQLAlchemyUserRepository(session).create(
            User(id="staff-1", email="ops@example.com", name="Ops Desk", role=UserRole.STAFF)
        )
        await session.commit()
        yield session
    await engine.dispose()


@pytest.fixture
def sessions(db) -> SessionService:
    identity = FakeIdentityProvider({"ops@example.com": "staff-1"})
    return SessionService(identity, SQLAlchemyUserRepository(db))


@pytest.mark.asyncio
async def test_resolved_context_leaves_no_open_transaction(db, sessions: SessionService):
    context = await get_session_context(authorization="Bearer token-staff-1", sessions=sessions, db=db)

    assert context.user_id == "staff-1"
    assert context.is_staff
    assert not db.in_transaction()


@pytest.mark.asyncio
async def test_rejected_token_also_ends_transaction(db, sessions: SessionService):
    with pytest.raises(HTTPException) as exc_info:
        await get_session_context(authorization="Bearer token-nobody", sessions=sessions, db=db)

    assert exc_info.value.status_code == 401
    assert not db.in_transaction()
