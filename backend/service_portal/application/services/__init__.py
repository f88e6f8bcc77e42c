from .change_feed import ChangeFeed
from .view_builder import build_view, count_by_status
from .sync_controller import ComplaintSyncController, SyncState
from .complaint_workflow import ComplaintWorkflow
from .session_service import SessionService, ViewRegistry

__all__ = [
    "ChangeFeed",
    "build_view",
    "count_by_status",
    "ComplaintSyncController",
    "SyncState",
    "ComplaintWorkflow",
    "SessionService",
    "ViewRegistry",
]
