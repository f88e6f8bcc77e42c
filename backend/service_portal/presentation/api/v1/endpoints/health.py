"""Health check endpoint — reports settings and live-view load."""

from fastapi import APIRouter, Depends

from service_portal.application.services import ChangeFeed
from service_portal.config import get_settings
from service_portal.infrastructure.dependencies import get_change_feed

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(feed: ChangeFeed = Depends(get_change_feed)) -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "live_subscriptions": feed.listener_count,
    }
