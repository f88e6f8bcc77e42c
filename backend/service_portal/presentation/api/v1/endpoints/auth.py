"""Authentication endpoints — thin wrappers over the SessionService."""

from fastapi import APIRouter, Depends, status

from service_portal.application.schemas import (
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    UserResponse,
)
from service_portal.application.services import SessionService
from service_portal.domain.entities import SessionContext
from service_portal.domain.exceptions import ServicePortalError
from service_portal.infrastructure.dependencies import get_session_context, get_session_service
from service_portal.presentation.api.errors import http_error

router = APIRouter(prefix="/auth", tags=["Auth"])


def _to_response(context: SessionContext) -> SessionResponse:
    return SessionResponse(
        user_id=context.user_id,
        email=context.email,
        display_name=context.display_name,
        role=context.role.value,
        access_token=context.access_token,
    )


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(
    data: SignInRequest,
    sessions: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        context = await sessions.sign_in(data.email, data.password)
    except ServicePortalError as e:
        raise http_error(e)
    return _to_response(context)


@router.post("/sign-up", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    data: SignUpRequest,
    sessions: SessionService = Depends(get_session_service),
) -> UserResponse:
    """Register a customer account. Staff accounts are provisioned out of band."""
    try:
        user = await sessions.sign_up(data.email, data.password, data.name, data.phone)
    except ServicePortalError as e:
        raise http_error(e)
    return UserResponse(
        id=user.id, email=user.email, name=user.name, phone=user.phone, role=user.role.value
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    context: SessionContext = Depends(get_session_context),
    sessions: SessionService = Depends(get_session_service),
) -> None:
    """Revoke the session and close every live view opened with it."""
    try:
        await sessions.sign_out(context)
    except ServicePortalError as e:
        raise http_error(e)


@router.get("/me", response_model=SessionResponse)
async def me(context: SessionContext = Depends(get_session_context)) -> SessionResponse:
    return _to_response(context)
