"""Unit tests for ComplaintWorkflow."""

import pytest

from service_portal.application.services import ComplaintSyncController, ComplaintWorkflow
from service_portal.domain.entities import (
    ComplaintDraft,
    ComplaintStatus,
    SessionContext,
    StatusFilter,
    UserRole,
)
from service_portal.domain.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StoreUnavailableError,
    ValidationError,
)
from tests.fakes import FakeComplaintStore

STAFF = SessionContext(user_id="staff-1", role=UserRole.STAFF, access_token="token-staff-1")
CUSTOMER = SessionContext(user_id="cust-a", role=UserRole.CUSTOMER, access_token="token-cust-a")


def _draft(**overrides) -> ComplaintDraft:
    fields = {
        "equipment_model": "EV-Sport 2024",
        "category": "battery",
        "priority": "high",
        "description": "Won't hold charge",
    }
    fields.update(overrides)
    return ComplaintDraft(**fields)


@pytest.fixture
def store() -> FakeComplaintStore:
    return FakeComplaintStore()


@pytest.mark.asyncio
async def test_submission_flows_to_staff_and_status_back_to_customer(store: FakeComplaintStore):
    customer_view = ComplaintSyncController(store, CUSTOMER)
    staff_view = ComplaintSyncController(store, STAFF)
    await customer_view.activate()
    await staff_view.activate()

    submitted = await ComplaintWorkflow(store, CUSTOMER, customer_view).submit(_draft())

    assert submitted.status is ComplaintStatus.PENDING
    assert submitted.owner_id == "cust-a"
    assert [c.id for c in customer_view.view.complaints] == [submitted.id]
    staff = await staff_view.wait_until_idle()
    assert [c.id for c in staff.complaints] == [submitted.id]
    assert staff.counts.pending == 1

    updated = await ComplaintWorkflow(store, STAFF, staff_view).set_status(submitted.id, "in-progress")

    assert updated.status is ComplaintStatus.IN_PROGRESS
    customer = await customer_view.wait_until_idle()
    assert customer.complaints[0].status is ComplaintStatus.IN_PROGRESS
    assert customer.counts.in_progress == 1
    # staff default filter hides it once it leaves pending
    assert staff_view.view.status_filter is StatusFilter.PENDING
    assert staff_view.view.complaints == ()

    customer_view.deactivate()
    staff_view.deactivate()


@pytest.mark.asyncio
async def test_invalid_submission_persists_nothing_and_keeps_draft(store: FakeComplaintStore):
    workflow = ComplaintWorkflow(store, CUSTOMER)
    draft = _draft(description="")

    with pytest.raises(ValidationError) as exc_info:
        await workflow.submit(draft)

    assert exc_info.value.field == "description"
    assert store.records == {}
    assert workflow.draft is draft


@pytest.mark.asyncio
async def test_store_outage_keeps_draft_for_retry(store: FakeComplaintStore):
    workflow = ComplaintWorkflow(store, CUSTOMER)
    draft = _draft()
    store.unavailable = True

    with pytest.raises(StoreUnavailableError):
        await workflow.submit(draft)
    assert workflow.draft is draft

    store.unavailable = False
    complaint = await workflow.submit(workflow.draft)
    assert complaint.id in store.records
    assert workflow.draft is None


@pytest.mark.asyncio
async def test_set_status_to_current_status_is_idempotent(store: FakeComplaintStore):
    created = await store.create(_draft(), "cust-a")
    workflow = ComplaintWorkflow(store, STAFF)

    first = await workflow.set_status(created.id, ComplaintStatus.PENDING)
    second = await workflow.set_status(created.id, ComplaintStatus.PENDING)

    assert first.status is second.status is ComplaintStatus.PENDING
    assert second.updated_at >= first.updated_at >= created.created_at


@pytest.mark.asyncio
async def test_set_notes_replaces_and_clears(store: FakeComplaintStore):
    created = await store.create(_draft(), "cust-a")
    workflow = ComplaintWorkflow(store, STAFF)

    annotated = await workflow.set_notes(created.id, "Ordered replacement cells")
    assert annotated.staff_notes == "Ordered replacement cells"

    cleared = await workflow.set_notes(created.id, "")
    assert cleared.staff_notes is None


@pytest.mark.asyncio
async def test_customer_cannot_change_status_or_notes(store: FakeComplaintStore):
    created = await store.create(_draft(), "cust-a")
    workflow = ComplaintWorkflow(store, CUSTOMER)

    with pytest.raises(PermissionDeniedError):
        await workflow.set_status(created.id, "completed")
    with pytest.raises(PermissionDeniedError):
        await workflow.set_notes(created.id, "mine now")

    assert store.records[created.id].status is ComplaintStatus.PENDING
    assert store.records[created.id].staff_notes is None


@pytest.mark.asyncio
async def test_unknown_status_is_rejected(store: FakeComplaintStore):
    created = await store.create(_draft(), "cust-a")
    with pytest.raises(ValidationError):
        await ComplaintWorkflow(store, STAFF).set_status(created.id, "archived")


@pytest.mark.asyncio
async def test_missing_complaint_refreshes_view_then_raises(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF)
    await controller.activate()
    workflow = ComplaintWorkflow(store, STAFF, controller)

    with pytest.raises(NotFoundError):
        await workflow.set_status("does-not-exist", "completed")

    assert store.list_calls == 2
    controller.deactivate()


@pytest.mark.asyncio
async def test_conflict_converges_on_stored_record(store: FakeComplaintStore):
    created = await store.create(_draft(), "cust-a")

    async def racing_update(complaint_id, patch, actor_role):
        raise ConflictError(complaint_id)

    store.update = racing_update
    result = await ComplaintWorkflow(store, STAFF).set_status(created.id, "completed")

    assert result.id == created.id
    assert result.status is ComplaintStatus.PENDING


@pytest.mark.asyncio
async def test_completion_reaches_customer_view_with_later_timestamp(store: FakeComplaintStore):
    created = await ComplaintWorkflow(store, CUSTOMER).submit(_draft())

    async with ComplaintSyncController(store, CUSTOMER) as customer_view:
        await ComplaintWorkflow(store, STAFF).set_status(created.id, ComplaintStatus.COMPLETED)
        view = await customer_view.wait_until_idle()

    shown = view.complaints[0]
    assert shown.status is ComplaintStatus.COMPLETED
    assert shown.updated_at > shown.created_at
    assert view.counts.completed == 1
