"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from service_portal.config import get_settings
from service_portal.application.interfaces import ComplaintStore, IdentityProvider
from service_portal.application.services import (
    ChangeFeed,
    ComplaintWorkflow,
    SessionService,
    ViewRegistry,
)
from service_portal.domain.entities import SessionContext
from service_portal.domain.exceptions import AuthenticationError, IdentityUnavailableError
from service_portal.infrastructure.database.complaint_store import SQLAlchemyComplaintStore
from service_portal.infrastructure.database.repositories import SQLAlchemyUserRepository
from service_portal.infrastructure.database.session import async_session_factory, get_db_session
from service_portal.infrastructure.identity import HttpIdentityProvider


@lru_cache
def get_change_feed() -> ChangeFeed:
    """Process-wide change feed shared by every store and view."""
    return ChangeFeed()


@lru_cache
def get_view_registry() -> ViewRegistry:
    return ViewRegistry()


@lru_cache
def get_identity_provider() -> IdentityProvider:
    settings = get_settings()
    return HttpIdentityProvider(
        base_url=settings.identity_base_url,
        api_key=settings.identity_api_key,
        timeout=settings.identity_timeout,
    )


@lru_cache
def get_complaint_store() -> ComplaintStore:
    return SQLAlchemyComplaintStore(async_session_factory, get_change_feed())


async def get_session_service(
    session: AsyncSession = Depends(get_db_session),
    identity: IdentityProvider = Depends(get_identity_provider),
    registry: ViewRegistry = Depends(get_view_registry),
) -> AsyncGenerator[SessionService, None]:
    """Provides a SessionService with the user repository bound to this request's session."""
    yield SessionService(identity, SQLAlchemyUserRepository(session), registry)


async def get_session_context(
    authorization: str | None = Header(None),
    sessions: SessionService = Depends(get_session_service),
    db: AsyncSession = Depends(get_db_session),
) -> SessionContext:
    """Resolve the bearer token into the caller's SessionContext.

    The profile lookup's transaction is ended before returning so that
    long-lived responses such as the live stream do not pin a pooled connection.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = authorization[7:].strip()
    try:
        return await sessions.restore(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    except IdentityUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    finally:
        await db.commit()


async def get_complaint_workflow(
    context: SessionContext = Depends(get_session_context),
    store: ComplaintStore = Depends(get_complaint_store),
) -> AsyncGenerator[ComplaintWorkflow, None]:
    """Provides a ComplaintWorkflow for the caller. Live views refresh through the change feed."""
    yield ComplaintWorkflow(store, context)
