"""Hosted identity provider client — implements the IdentityProvider interface.

Talks to a GoTrue-compatible auth REST API (``/auth/v1/...``) with httpx.
Only the user id, email and tokens are read from its responses; roles
live in the portal's own ``users`` table.
"""

import logging
from typing import Any

import httpx

from service_portal.application.interfaces import AuthSession, IdentityProvider, SessionEvent
from service_portal.domain.exceptions import AuthenticationError, IdentityUnavailableError

logger = logging.getLogger(__name__)


class HttpIdentityProvider(IdentityProvider):
    """Infrastructure adapter — connects to the hosted auth service.

    An ``httpx.AsyncClient`` may be injected (tests use ``MockTransport``);
    otherwise a short-lived client is created per call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__()
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._http_client = http_client

    def _get_headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
        bearer = access_token or self._api_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        client = self._http_client or httpx.AsyncClient(timeout=self._timeout)
        should_close = self._http_client is None
        url = f"{self._base_url}/auth/v1{path}"

        try:
            response = await client.request(
                method,
                url,
                headers=self._get_headers(access_token),
                params=params,
                json=json,
            )
        except httpx.TransportError as exc:
            logger.warning("Identity provider request %s %s failed: %s", method, path, exc)
            raise IdentityUnavailableError(str(exc) or type(exc).__name__) from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 500:
            raise IdentityUnavailableError(f"HTTP {response.status_code}")
        if response.status_code >= 400:
            self._raise_auth_error(response)
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Identity provider returned non-JSON body for %s %s", method, path)
            raise IdentityUnavailableError("invalid JSON response") from exc

    @staticmethod
    def _raise_auth_error(response: httpx.Response) -> None:
        """Map a 4xx response to AuthenticationError with the provider's message."""
        message = f"HTTP {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, dict):
            message = (
                body.get("error_description")
                or body.get("msg")
                or body.get("message")
                or body.get("error")
                or message
            )
        raise AuthenticationError(str(message), status_code=response.status_code)

    @staticmethod
    def _parse_session(data: dict[str, Any]) -> AuthSession:
        user = data.get("user") or {}
        user_id = user.get("id")
        token = data.get("access_token")
        if not user_id or not token:
            raise AuthenticationError("Identity provider returned an incomplete session")
        return AuthSession(
            user_id=user_id,
            email=user.get("email", ""),
            access_token=token,
            refresh_token=data.get("refresh_token", ""),
        )

    async def sign_in(self, email: str, password: str) -> AuthSession:
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = self._parse_session(data)
        logger.info("Signed in %s", session.user_id)
        self._emit(SessionEvent.SIGNED_IN, session)
        return session

    async def sign_up(self, email: str, password: str) -> str:
        data = await self._request("POST", "/signup", json={"email": email, "password": password})
        # Response is the user object, or a session wrapping it when auto-confirm is on
        user = data.get("user") if isinstance(data.get("user"), dict) else data
        user_id = user.get("id")
        if not user_id:
            raise AuthenticationError("Identity provider did not return a user id")
        return user_id

    async def sign_out(self, access_token: str) -> None:
        await self._request("POST", "/logout", access_token=access_token)
        self._emit(SessionEvent.SIGNED_OUT, None)

    async def get_session(self, access_token: str) -> AuthSession:
        user = await self._request("GET", "/user", access_token=access_token)
        if not user.get("id"):
            raise AuthenticationError("Invalid or expired session")
        return AuthSession(user_id=user["id"], email=user.get("email", ""), access_token=access_token)
