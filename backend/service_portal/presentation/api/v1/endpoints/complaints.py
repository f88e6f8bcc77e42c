"""Complaint endpoints — scoped view, submission and staff annotation."""

from fastapi import APIRouter, Depends, Query, status

from service_portal.application.interfaces import ComplaintStore
from service_portal.application.schemas import (
    ComplaintResponse,
    ComplaintSubmit,
    NotesUpdate,
    ScopedViewResponse,
    StatusUpdate,
)
from service_portal.application.services import ComplaintWorkflow, build_view
from service_portal.config import get_settings
from service_portal.domain.entities import SessionContext
from service_portal.domain.exceptions import NotFoundError, ServicePortalError
from service_portal.infrastructure.dependencies import (
    get_complaint_store,
    get_complaint_workflow,
    get_session_context,
)
from service_portal.presentation.api.errors import http_error

router = APIRouter(prefix="/complaints", tags=["Complaints"])


@router.get("", response_model=ScopedViewResponse)
async def get_view(
    status_filter: str | None = Query(None, description="all | pending | in-progress | completed"),
    context: SessionContext = Depends(get_session_context),
    store: ComplaintStore = Depends(get_complaint_store),
) -> ScopedViewResponse:
    """One-shot render of the caller's scoped view: list, counts and effective filter."""
    if status_filter is None and context.is_staff:
        status_filter = get_settings().staff_default_filter
    try:
        records = await store.list(context.scope)
    except ServicePortalError as e:
        raise http_error(e)
    view = build_view(records, context.scope, status_filter)
    return ScopedViewResponse.from_view(view, include_owner=context.is_staff)


@router.post("", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
async def submit_complaint(
    data: ComplaintSubmit,
    workflow: ComplaintWorkflow = Depends(get_complaint_workflow),
) -> ComplaintResponse:
    """Submit a new complaint. It always starts as pending."""
    try:
        complaint = await workflow.submit(data.to_draft())
    except ServicePortalError as e:
        raise http_error(e)
    return ComplaintResponse.from_entity(complaint)


@router.get("/{complaint_id}", response_model=ComplaintResponse)
async def get_complaint(
    complaint_id: str,
    context: SessionContext = Depends(get_session_context),
    store: ComplaintStore = Depends(get_complaint_store),
) -> ComplaintResponse:
    try:
        complaint = await store.get(complaint_id)
        if not context.scope.includes(complaint.owner_id):
            raise NotFoundError("Complaint", complaint_id)
    except ServicePortalError as e:
        raise http_error(e)
    return ComplaintResponse.from_entity(complaint, include_owner=context.is_staff)


@router.patch("/{complaint_id}/status", response_model=ComplaintResponse)
async def set_status(
    complaint_id: str,
    data: StatusUpdate,
    workflow: ComplaintWorkflow = Depends(get_complaint_workflow),
) -> ComplaintResponse:
    """Staff only: move a complaint to any status."""
    try:
        complaint = await workflow.set_status(complaint_id, data.status)
    except ServicePortalError as e:
        raise http_error(e)
    return ComplaintResponse.from_entity(complaint, include_owner=True)


@router.patch("/{complaint_id}/notes", response_model=ComplaintResponse)
async def set_notes(
    complaint_id: str,
    data: NotesUpdate,
    workflow: ComplaintWorkflow = Depends(get_complaint_workflow),
) -> ComplaintResponse:
    """Staff only: replace the internal notes."""
    try:
        complaint = await workflow.set_notes(complaint_id, data.notes)
    except ServicePortalError as e:
        raise http_error(e)
    return ComplaintResponse.from_entity(complaint, include_owner=True)
