"""Session service — builds and tears down the explicit SessionContext."""

import logging
from collections.abc import Callable

from service_portal.application.interfaces import (
    AuthSession,
    IdentityProvider,
    SessionListener,
    UserRepository,
)
from service_portal.application.services.sync_controller import ComplaintSyncController
from service_portal.domain.entities import SessionContext, User, UserRole
from service_portal.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ViewRegistry:
    """Tracks the sync controllers opened per session so sign-out can release them."""

    def __init__(self) -> None:
        self._controllers: dict[str, list[ComplaintSyncController]] = {}

    def register(self, controller: ComplaintSyncController) -> None:
        token = controller.context.access_token
        self._controllers.setdefault(token, []).append(controller)

    def unregister(self, controller: ComplaintSyncController) -> None:
        token = controller.context.access_token
        controllers = self._controllers.get(token, [])
        if controller in controllers:
            controllers.remove(controller)
        if not controllers:
            self._controllers.pop(token, None)

    def active(self, context: SessionContext) -> list[ComplaintSyncController]:
        return list(self._controllers.get(context.access_token, []))

    def release(self, context: SessionContext) -> int:
        """Deactivate and forget every controller of ``context``. Returns how many were released."""
        controllers = self._controllers.pop(context.access_token, [])
        for controller in controllers:
            controller.deactivate()
        return len(controllers)


class SessionService:
    """Orchestrates sign-in, sign-up and sign-out against the identity provider.

    Role resolution reads the ``users`` table; a missing profile or a failed
    lookup yields the customer role.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        users: UserRepository,
        registry: ViewRegistry | None = None,
    ):
        self._identity = identity
        self._users = users
        self._registry = registry or ViewRegistry()

    async def sign_in(self, email: str, password: str) -> SessionContext:
        session = await self._identity.sign_in(email.strip(), password)
        return await self._build_context(session)

    async def restore(self, access_token: str) -> SessionContext:
        """Rebuild the context for an existing access token."""
        session = await self._identity.get_session(access_token)
        return await self._build_context(session)

    async def sign_up(self, email: str, password: str, name: str = "", phone: str = "") -> User:
        """Register a customer account. The user signs in separately afterwards."""
        email = email.strip()
        if not email:
            raise ValidationError("email", "must not be empty")
        if not password:
            raise ValidationError("password", "must not be empty")
        user_id = await self._identity.sign_up(email, password)
        user = await self._users.create(
            User(id=user_id, email=email, name=name.strip(), phone=phone.strip(), role=UserRole.CUSTOMER)
        )
        logger.info("Registered customer %s", user.id)
        return user

    async def sign_out(self, context: SessionContext) -> None:
        """Release every view opened for ``context`` and revoke the session."""
        released = self._registry.release(context)
        await self._identity.sign_out(context.access_token)
        logger.info("Signed out %s (%d view(s) released)", context.user_id, released)

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Observe sign-in / sign-out transitions of the identity provider."""
        return self._identity.on_session_change(listener)

    async def _build_context(self, session: AuthSession) -> SessionContext:
        role = UserRole.CUSTOMER
        name = ""
        try:
            user = await self._users.get_by_id(session.user_id)
        except Exception:
            logger.exception("Role lookup failed for %s; defaulting to customer", session.user_id)
            user = None
        if user is not None:
            role = user.role
            name = user.name
        return SessionContext(
            user_id=session.user_id,
            role=role,
            email=session.email,
            display_name=name,
            access_token=session.access_token,
        )
