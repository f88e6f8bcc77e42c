"""Live view stream — one sync controller per connected viewer, pushed over SSE."""

import asyncio
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from service_portal.application.interfaces import ComplaintStore
from service_portal.application.schemas import ScopedViewResponse
from service_portal.application.services import ComplaintSyncController, ViewRegistry
from service_portal.config import get_settings
from service_portal.domain.entities import ScopedView, SessionContext
from service_portal.infrastructure.dependencies import (
    get_complaint_store,
    get_session_context,
    get_view_registry,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/complaints", tags=["Complaints"])


def _format_event(view: ScopedView, include_owner: bool) -> str:
    payload = ScopedViewResponse.from_view(view, include_owner=include_owner)
    return f"event: view\ndata: {payload.model_dump_json()}\n\n"


async def stream_view(
    controller: ComplaintSyncController,
    registry: ViewRegistry,
    request: Request | None = None,
    keepalive_seconds: float = 15.0,
) -> AsyncGenerator[str, None]:
    """Activate ``controller`` and yield a ``view`` event for each rendered view.

    Views rendered while the client is slow are collapsed to the newest one.
    The controller is deactivated when the client disconnects or the
    session signs out.
    """
    queue: asyncio.Queue[ScopedView] = asyncio.Queue()
    include_owner = controller.context.is_staff

    def on_view(view: ScopedView) -> None:
        if not view.loading:
            queue.put_nowait(view)

    remove_listener = controller.add_listener(on_view)
    registry.register(controller)
    try:
        await controller.activate()
        while controller.is_active:
            if request is not None and await request.is_disconnected():
                break
            try:
                view = await asyncio.wait_for(queue.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            while not queue.empty():
                view = queue.get_nowait()
            yield _format_event(view, include_owner)
    finally:
        remove_listener()
        controller.deactivate()
        registry.unregister(controller)
        logger.debug("Live view closed for %s", controller.scope)


@router.get("/live")
async def live_view(
    request: Request,
    status_filter: str | None = Query(None, description="all | pending | in-progress | completed"),
    context: SessionContext = Depends(get_session_context),
    store: ComplaintStore = Depends(get_complaint_store),
    registry: ViewRegistry = Depends(get_view_registry),
) -> StreamingResponse:
    """SSE endpoint streaming the caller's scoped view.

    Clients connect via EventSource and receive a 'view' event after the
    initial fetch and after every refresh triggered by a complaint change.
    """
    settings = get_settings()
    if status_filter is None and context.is_staff:
        status_filter = settings.staff_default_filter
    controller = ComplaintSyncController(store, context, status_filter)
    return StreamingResponse(
        stream_view(controller, registry, request, settings.live_view_keepalive_seconds),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
