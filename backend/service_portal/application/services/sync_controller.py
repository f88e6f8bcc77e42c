"""Realtime sync controller — keeps one active view consistent with the store.

Lifecycle per view::

    idle --activate()--> subscribed --change--> refreshing --done--> subscribed
      ^                                                                  |
      +---------------------------- deactivate() ------------------------+

Every change signal triggers a full re-fetch of the scope. Refreshes are
serialized: signals that arrive while a refresh is in flight collapse into
exactly one follow-up refresh.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum

from service_portal.application.interfaces import ComplaintStore, Subscription
from service_portal.application.services.view_builder import build_view
from service_portal.domain.entities import (
    Complaint,
    ScopedView,
    SessionContext,
    StatusFilter,
    ViewerScope,
)
from service_portal.domain.exceptions import ServicePortalError

logger = logging.getLogger(__name__)

ViewListener = Callable[[ScopedView], None]


class SyncState(str, Enum):
    IDLE = "idle"
    SUBSCRIBED = "subscribed"
    REFRESHING = "refreshing"


class ComplaintSyncController:
    """Owns the subscription and the last rendered view for one viewer scope."""

    def __init__(
        self,
        store: ComplaintStore,
        context: SessionContext,
        status_filter: StatusFilter | str | None = None,
    ) -> None:
        self._store = store
        self._context = context
        self._scope: ViewerScope = context.scope
        if status_filter is None:
            status_filter = StatusFilter.PENDING if context.is_staff else StatusFilter.ALL
        self._filter = StatusFilter.parse(status_filter)

        self._state = SyncState.IDLE
        self._subscription: Subscription | None = None
        self._refresh_task: asyncio.Task | None = None
        self._dirty = False

        self._records: list[Complaint] = []
        self._error: str | None = None
        self._refresh_count = 0
        self._last_refreshed_at: datetime | None = None
        self._listeners: list[ViewListener] = []
        self._view = build_view([], self._scope, self._filter)

    # ── Properties ───────────────────────────────────────────────────

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def scope(self) -> ViewerScope:
        return self._scope

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not SyncState.IDLE

    @property
    def view(self) -> ScopedView:
        return self._view

    @property
    def status_filter(self) -> StatusFilter:
        return self._view.status_filter

    # ── Lifecycle ────────────────────────────────────────────────────

    async def activate(self) -> ScopedView:
        """Open the scoped subscription and perform the initial fetch."""
        if self.is_active:
            return self._view
        self._subscription = self._store.subscribe(self._scope, self._on_change)
        self._state = SyncState.SUBSCRIBED
        logger.info("View activated for %s", self._scope)
        return await self.refresh()

    def deactivate(self) -> None:
        """Release the subscription and abandon any refresh in flight."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
        self._refresh_task = None
        self._dirty = False
        if self._state is not SyncState.IDLE:
            self._state = SyncState.IDLE
            logger.info("View deactivated for %s", self._scope)
        if self._view.loading:
            self._render()

    async def __aenter__(self) -> "ComplaintSyncController":
        await self.activate()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.deactivate()

    # ── Commands ─────────────────────────────────────────────────────

    async def refresh(self) -> ScopedView:
        """Re-fetch the scope and return the rendered view.

        Joins the refresh in flight if there is one, after marking it dirty
        so the result reflects a fetch started after this call.
        """
        if not self.is_active:
            return self._view
        if self._refresh_task is None:
            self._refresh_task = asyncio.create_task(self._run_refreshes())
        else:
            self._dirty = True
        await asyncio.wait({self._refresh_task})
        return self._view

    async def wait_until_idle(self) -> ScopedView:
        """Wait for any scheduled or in-flight refresh to finish."""
        while self._refresh_task is not None:
            await asyncio.wait({self._refresh_task})
        return self._view

    def set_filter(self, status_filter: StatusFilter | str | None) -> ScopedView:
        """Change the staff status filter. Recomputes from the last fetched records."""
        self._filter = StatusFilter.parse(status_filter)
        self._render()
        return self._view

    def add_listener(self, listener: ViewListener) -> Callable[[], None]:
        """Observe every newly rendered view. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ── Internals ────────────────────────────────────────────────────

    def _on_change(self) -> None:
        if not self.is_active:
            return
        if self._refresh_task is not None:
            self._dirty = True
            return
        self._refresh_task = asyncio.get_running_loop().create_task(self._run_refreshes())

    async def _run_refreshes(self) -> None:
        try:
            while True:
                self._dirty = False
                await self._fetch_once()
                if not self._dirty or not self.is_active:
                    break
        finally:
            if self._refresh_task is asyncio.current_task():
                self._refresh_task = None

    async def _fetch_once(self) -> None:
        self._state = SyncState.REFRESHING
        self._render(loading=True)
        try:
            records = await self._store.list(self._scope)
        except ServicePortalError as exc:
            self._error = str(exc)
            logger.warning("Refresh failed for %s, keeping last view: %s", self._scope, exc)
        except Exception as exc:
            self._error = str(exc) or type(exc).__name__
            logger.exception("Unexpected refresh failure for %s", self._scope)
        else:
            self._records = records
            self._error = None
            self._refresh_count += 1
            self._last_refreshed_at = datetime.now(timezone.utc)
            logger.debug("Refreshed %s: %d record(s)", self._scope, len(records))
        finally:
            # a task abandoned by deactivate must not touch a later activation's state
            if self._state is SyncState.REFRESHING and self._refresh_task is asyncio.current_task():
                self._state = SyncState.SUBSCRIBED
        self._render()

    def _render(self, *, loading: bool = False) -> None:
        self._view = build_view(
            self._records,
            self._scope,
            self._filter,
            loading=loading,
            error=self._error,
            last_refreshed_at=self._last_refreshed_at,
            refresh_count=self._refresh_count,
        )
        for listener in list(self._listeners):
            try:
                listener(self._view)
            except Exception:
                logger.exception("View listener failed for %s", self._scope)
