"""Complaint store backed by SQLAlchemy, publishing change signals after each commit."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from service_portal.application.interfaces import ChangeListener, ComplaintStore, Subscription
from service_portal.application.services.change_feed import ChangeFeed
from service_portal.domain.complaint_lifecycle import apply_patch, authorize_patch
from service_portal.domain.entities import (
    Complaint,
    ComplaintDraft,
    ComplaintPatch,
    UserRole,
    ViewerScope,
)
from service_portal.domain.exceptions import NotFoundError, StoreUnavailableError
from service_portal.infrastructure.database.repositories import SQLAlchemyComplaintRepository

logger = logging.getLogger(__name__)

_CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


class SQLAlchemyComplaintStore(ComplaintStore):
    """Implements the ComplaintStore port.

    Every operation runs in its own session with commit/rollback
    boundaries. Connectivity failures surface as StoreUnavailableError.
    Creates and updates notify the change feed once committed.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        change_feed: ChangeFeed,
    ) -> None:
        self._session_factory = session_factory
        self._feed = change_feed

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[SQLAlchemyComplaintRepository]:
        try:
            async with self._session_factory() as session:
                try:
                    yield SQLAlchemyComplaintRepository(session)
                    await session.commit()
                except BaseException:
                    await session.rollback()
                    raise
        except _CONNECTIVITY_ERRORS as exc:
            logger.warning("Store operation '%s' failed: %s", operation, exc)
            raise StoreUnavailableError(operation, str(exc)) from exc

    async def create(self, draft: ComplaintDraft, owner_id: str) -> Complaint:
        complaint = Complaint.open(draft, owner_id)
        async with self._transaction("create") as repo:
            saved = await repo.create(complaint)
        logger.info("Created complaint %s for %s", saved.id, owner_id)
        self._feed.publish(saved.owner_id, saved.id, "created")
        return saved

    async def get(self, complaint_id: str) -> Complaint:
        async with self._transaction("get") as repo:
            complaint = await repo.get_by_id(complaint_id, with_owner=True)
        if complaint is None:
            raise NotFoundError("Complaint", complaint_id)
        return complaint

    async def update(
        self,
        complaint_id: str,
        patch: ComplaintPatch,
        actor_role: UserRole,
    ) -> Complaint:
        authorize_patch(patch, actor_role)
        async with self._transaction("update") as repo:
            complaint = await repo.get_by_id(complaint_id)
            if complaint is None:
                raise NotFoundError("Complaint", complaint_id)
            if patch.is_empty:
                return complaint
            apply_patch(complaint, patch, actor_role)
            saved = await repo.save(complaint, patch)
        self._feed.publish(saved.owner_id, saved.id, "updated")
        return saved

    def subscribe(self, scope: ViewerScope, on_change: ChangeListener) -> Subscription:
        return self._feed.subscribe(scope, on_change)

    async def list(self, scope: ViewerScope) -> list[Complaint]:
        async with self._transaction("list") as repo:
            return await repo.get_all(owner_id=scope.owner_filter, with_owner=scope.is_staff)
