"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from service_portal.presentation.api.v1.endpoints.health import router as health_router
from service_portal.presentation.api.v1.endpoints.auth import router as auth_router
from service_portal.presentation.api.v1.endpoints.live import router as live_router
from service_portal.presentation.api.v1.endpoints.complaints import router as complaints_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(auth_router)
# /complaints/live must be matched before /complaints/{complaint_id}
router.include_router(live_router)
router.include_router(complaints_router)
