"""Unit tests for the in-process change feed."""

from service_portal.application.services import ChangeFeed
from service_portal.domain.entities import ViewerScope


def test_customer_hears_only_own_complaints():
    feed = ChangeFeed()
    calls: list[str] = []
    feed.subscribe(ViewerScope(user_id="cust-a"), lambda: calls.append("a"))
    feed.subscribe(ViewerScope(user_id="cust-b"), lambda: calls.append("b"))

    assert feed.publish("cust-a", "c-1", "created") == 1
    assert calls == ["a"]


def test_staff_hears_everything():
    feed = ChangeFeed()
    calls: list[str] = []
    feed.subscribe(ViewerScope(user_id="staff-1", is_staff=True), lambda: calls.append("staff"))

    feed.publish("cust-a", "c-1", "created")
    feed.publish("cust-b", "c-2", "updated")

    assert calls == ["staff", "staff"]


def test_cancel_is_idempotent_and_stops_delivery():
    feed = ChangeFeed()
    calls: list[int] = []
    subscription = feed.subscribe(ViewerScope(user_id="cust-a"), lambda: calls.append(1))
    assert subscription.active

    subscription.cancel()
    subscription.cancel()

    assert not subscription.active
    assert feed.listener_count == 0
    assert feed.publish("cust-a", "c-1", "updated") == 0
    assert calls == []


def test_failing_listener_does_not_block_others():
    feed = ChangeFeed()
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("boom")

    feed.subscribe(ViewerScope(user_id="cust-a"), broken)
    feed.subscribe(ViewerScope(user_id="cust-a"), lambda: calls.append("ok"))

    assert feed.publish("cust-a", "c-1", "created") == 1
    assert calls == ["ok"]


def test_listener_may_cancel_itself_while_publishing():
    feed = ChangeFeed()
    subscriptions = []
    subscriptions.append(feed.subscribe(ViewerScope(user_id="cust-a"), lambda: subscriptions[0].cancel()))

    feed.publish("cust-a", "c-1", "created")
    assert feed.listener_count == 0


def test_shutdown_drops_all_registrations():
    feed = ChangeFeed()
    feed.subscribe(ViewerScope(user_id="cust-a"), lambda: None)
    feed.subscribe(ViewerScope(user_id="staff-1", is_staff=True), lambda: None)

    feed.shutdown()
    assert feed.listener_count == 0
