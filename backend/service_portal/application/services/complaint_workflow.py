"""Submission and annotation workflow — the commands a view issues against the store."""

import logging

from service_portal.application.interfaces import ComplaintStore
from service_portal.application.services.sync_controller import ComplaintSyncController
from service_portal.domain.complaint_lifecycle import require_staff
from service_portal.domain.entities import (
    Complaint,
    ComplaintDraft,
    ComplaintPatch,
    ComplaintStatus,
    SessionContext,
)
from service_portal.domain.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class ComplaintWorkflow:
    """Validates and applies user commands, then refreshes the bound view.

    The workflow keeps the last submitted draft until it is accepted by the
    store, so a failed submission can be corrected and resubmitted.
    """

    def __init__(
        self,
        store: ComplaintStore,
        context: SessionContext,
        controller: ComplaintSyncController | None = None,
    ) -> None:
        self._store = store
        self._context = context
        self._controller = controller
        self.draft: ComplaintDraft | None = None

    async def submit(self, draft: ComplaintDraft) -> Complaint:
        """Create a new pending complaint owned by the current user."""
        self.draft = draft
        draft.validated()
        try:
            complaint = await self._store.create(draft, self._context.user_id)
        except Exception:
            logger.warning("Submission failed for user %s; draft retained", self._context.user_id)
            raise
        self.draft = None
        logger.info("Complaint %s submitted by %s", complaint.id, self._context.user_id)
        await self._refresh()
        return complaint

    async def set_status(self, complaint_id: str, new_status: ComplaintStatus | str) -> Complaint:
        """Staff only: move a complaint to ``new_status`` (any status, including its current one)."""
        require_staff(self._context.role, "change complaint status")
        status = ComplaintStatus.parse(new_status, "status")
        return await self._update(complaint_id, ComplaintPatch(status=status))

    async def set_notes(self, complaint_id: str, notes: str) -> Complaint:
        """Staff only: replace the internal notes on a complaint."""
        require_staff(self._context.role, "edit staff notes")
        return await self._update(complaint_id, ComplaintPatch(notes=notes or ""))

    async def _update(self, complaint_id: str, patch: ComplaintPatch) -> Complaint:
        try:
            complaint = await self._store.update(complaint_id, patch, self._context.role)
        except NotFoundError:
            logger.info("Complaint %s no longer exists; refreshing view", complaint_id)
            await self._refresh()
            raise
        except ConflictError as exc:
            logger.info("Conflict on complaint %s (%s); converging via refresh", complaint_id, exc)
            await self._refresh()
            return await self._store.get(complaint_id)
        await self._refresh()
        return complaint

    async def _refresh(self) -> None:
        if self._controller is not None:
            await self._controller.refresh()
