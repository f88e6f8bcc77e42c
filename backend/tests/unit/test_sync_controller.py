"""Unit tests for ComplaintSyncController."""

import asyncio

import pytest

from service_portal.application.services import ComplaintSyncController, SyncState
from service_portal.domain.entities import (
    ComplaintDraft,
    ComplaintPatch,
    ComplaintStatus,
    ScopedView,
    SessionContext,
    StatusFilter,
    UserRole,
)
from tests.fakes import FakeComplaintStore

STAFF = SessionContext(user_id="staff-1", role=UserRole.STAFF, access_token="token-staff-1")
CUSTOMER = SessionContext(user_id="cust-a", role=UserRole.CUSTOMER, access_token="token-cust-a")


def _draft(description: str = "Won't hold charge") -> ComplaintDraft:
    return ComplaintDraft(
        equipment_model="EV-Sport 2024", category="battery", priority="high", description=description
    )


def _status_patch(raw: str) -> ComplaintPatch:
    return ComplaintPatch(status=ComplaintStatus.parse(raw, "status"))


@pytest.fixture
def store() -> FakeComplaintStore:
    return FakeComplaintStore()


def test_default_filter_depends_on_role(store: FakeComplaintStore):
    assert ComplaintSyncController(store, STAFF).status_filter is StatusFilter.PENDING
    assert ComplaintSyncController(store, CUSTOMER).status_filter is StatusFilter.ALL


@pytest.mark.asyncio
async def test_activate_subscribes_and_fetches(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF, StatusFilter.ALL)
    assert controller.state is SyncState.IDLE

    view = await controller.activate()

    assert controller.state is SyncState.SUBSCRIBED
    assert store.feed.listener_count == 1
    assert store.list_calls == 1
    assert view.refresh_count == 1
    assert view.last_refreshed_at is not None
    assert not view.loading
    controller.deactivate()


@pytest.mark.asyncio
async def test_activate_twice_keeps_one_subscription(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF)
    await controller.activate()
    await controller.activate()
    assert store.feed.listener_count == 1
    assert store.list_calls == 1
    controller.deactivate()


@pytest.mark.asyncio
async def test_remote_mutation_triggers_exactly_one_refetch(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF, StatusFilter.ALL)
    await controller.activate()

    created = await store.create(_draft(), "cust-a")
    view = await controller.wait_until_idle()

    assert store.list_calls == 2
    assert [c.id for c in view.complaints] == [created.id]
    assert view.counts.pending == 1

    await store.update(created.id, _status_patch("in-progress"), UserRole.STAFF)
    view = await controller.wait_until_idle()

    assert store.list_calls == 3
    assert view.counts.in_progress == 1
    controller.deactivate()


@pytest.mark.asyncio
async def test_customer_is_not_signalled_for_other_owners(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, CUSTOMER)
    await controller.activate()

    await store.create(_draft(), "cust-b")
    await asyncio.sleep(0)

    assert store.list_calls == 1
    assert controller.view.complaints == ()
    controller.deactivate()


@pytest.mark.asyncio
async def test_signals_during_refresh_coalesce_into_one_follow_up(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF, StatusFilter.ALL)
    await controller.activate()
    store.gate = asyncio.Event()

    await store.create(_draft("first"), "cust-a")
    await asyncio.sleep(0)
    assert store.list_calls == 2
    assert controller.state is SyncState.REFRESHING
    assert controller.view.loading

    await store.create(_draft("second"), "cust-a")
    await store.create(_draft("third"), "cust-b")
    assert store.list_calls == 2

    store.gate.set()
    view = await controller.wait_until_idle()

    assert store.list_calls == 3
    assert view.counts.total == 3
    assert controller.state is SyncState.SUBSCRIBED
    controller.deactivate()


@pytest.mark.asyncio
async def test_failed_refresh_keeps_last_view_and_reports_error(store: FakeComplaintStore):
    await store.create(_draft(), "cust-a")
    controller = ComplaintSyncController(store, CUSTOMER)
    await controller.activate()

    store.unavailable = True
    view = await controller.refresh()

    assert len(view.complaints) == 1
    assert view.refresh_count == 1
    assert view.error is not None
    assert "unavailable" in view.error.lower()
    assert controller.state is SyncState.SUBSCRIBED

    store.unavailable = False
    view = await controller.refresh()

    assert view.error is None
    assert view.refresh_count == 2
    controller.deactivate()


@pytest.mark.asyncio
async def test_deactivate_releases_subscription(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF)
    await controller.activate()

    controller.deactivate()
    controller.deactivate()

    assert controller.state is SyncState.IDLE
    assert store.feed.listener_count == 0

    await store.create(_draft(), "cust-a")
    await asyncio.sleep(0)
    assert store.list_calls == 1


@pytest.mark.asyncio
async def test_deactivate_abandons_refresh_in_flight(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF)
    await controller.activate()
    store.gate = asyncio.Event()

    await store.create(_draft(), "cust-a")
    await asyncio.sleep(0)
    assert controller.state is SyncState.REFRESHING

    controller.deactivate()
    await asyncio.sleep(0)

    assert controller.state is SyncState.IDLE
    assert not controller.view.loading
    assert controller.view.refresh_count == 1
    assert await controller.wait_until_idle() is controller.view


class _SlowCancelStore(FakeComplaintStore):
    """A store whose ``list`` finishes its round trip before honouring cancellation."""

    def __init__(self):
        super().__init__()
        self.drain = asyncio.Event()

    async def list(self, scope):
        try:
            return await super().list(scope)
        except asyncio.CancelledError:
            await self.drain.wait()
            raise


async def _spin(turns: int = 5) -> None:
    for _ in range(turns):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_abandoned_refresh_does_not_disturb_reactivation():
    store = _SlowCancelStore()
    controller = ComplaintSyncController(store, STAFF)
    await controller.activate()
    store.gate = asyncio.Event()

    await store.create(_draft(), "cust-a")
    await _spin()
    controller.deactivate()
    assert not controller.view.loading

    activation = asyncio.create_task(controller.activate())
    await _spin()
    assert controller.state is SyncState.REFRESHING

    store.drain.set()
    await _spin()
    assert controller.state is SyncState.REFRESHING
    assert controller.view.loading

    store.gate.set()
    view = await activation
    assert controller.state is SyncState.SUBSCRIBED
    assert not view.loading
    assert len(view.complaints) == 1
    controller.deactivate()


@pytest.mark.asyncio
async def test_refresh_when_idle_does_not_fetch(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, STAFF)
    view = await controller.refresh()
    assert store.list_calls == 0
    assert view.refresh_count == 0


@pytest.mark.asyncio
async def test_set_filter_recomputes_without_refetch(store: FakeComplaintStore):
    first = await store.create(_draft("first"), "cust-a")
    await store.create(_draft("second"), "cust-b")
    await store.update(first.id, _status_patch("completed"), UserRole.STAFF)

    controller = ComplaintSyncController(store, STAFF)
    view = await controller.activate()
    assert view.status_filter is StatusFilter.PENDING
    assert len(view.complaints) == 1

    view = controller.set_filter("completed")

    assert store.list_calls == 1
    assert [c.id for c in view.complaints] == [first.id]
    assert view.counts.total == 2
    controller.deactivate()


@pytest.mark.asyncio
async def test_listeners_see_loading_then_result(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, CUSTOMER)
    seen: list[ScopedView] = []
    remove = controller.add_listener(seen.append)

    await controller.activate()

    assert [v.loading for v in seen] == [True, False]
    remove()
    await controller.refresh()
    assert len(seen) == 2
    controller.deactivate()


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_refresh(store: FakeComplaintStore):
    controller = ComplaintSyncController(store, CUSTOMER)

    def broken(view: ScopedView) -> None:
        raise RuntimeError("render failed")

    controller.add_listener(broken)
    view = await controller.activate()
    assert view.refresh_count == 1
    controller.deactivate()


@pytest.mark.asyncio
async def test_context_manager_scopes_the_subscription(store: FakeComplaintStore):
    async with ComplaintSyncController(store, CUSTOMER) as controller:
        assert controller.is_active
        assert store.feed.listener_count == 1
    assert not controller.is_active
    assert store.feed.listener_count == 0
