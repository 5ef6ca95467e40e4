from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from app.application.exceptions import AuthError
from app.application.ports.auth import AuthPort, AuthStateListener
from app.core.config import settings
from app.domain.entities.identity import AuthenticatedIdentity, AuthSession

# Refresh a little before the provider's expiry.
EXPIRY_MARGIN_SECONDS = 30


class SupabaseAuth(AuthPort):
    """GoTrue client holding one user's session in memory."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.SUPABASE_ANON_KEY
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._clock = clock
        self._session: AuthSession | None = None
        self._listeners: list[AuthStateListener] = []
        self._logger = logging.getLogger(__name__)

        if not self._base_url or not self._api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required for Supabase auth")

    def current_access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    async def fresh_access_token(self) -> str | None:
        """Access token for outgoing requests, refreshed first if it is about to expire."""
        session = await self.get_session()
        return session.access_token if session else None

    async def sign_up(self, email: str, password: str, metadata: dict[str, str]) -> AuthSession | None:
        data = await self._post("/auth/v1/signup", {"email": email, "password": password, "data": metadata})
        if not data.get("access_token"):
            # Email confirmation pending: the provider returns the user without a session.
            self._logger.info("Sign-up awaiting email confirmation")
            return None
        session = self._session_from_payload(data)
        await self._set_session("SIGNED_IN", session)
        return session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = await self._post(
            "/auth/v1/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        session = self._session_from_payload(data)
        await self._set_session("SIGNED_IN", session)
        return session

    async def get_session(self) -> AuthSession | None:
        session = self._session
        if session is None or session.expires_at is None:
            return session
        if session.expires_at - EXPIRY_MARGIN_SECONDS > self._clock():
            return session
        if not session.refresh_token:
            await self._set_session("SIGNED_OUT", None)
            return None
        try:
            data = await self._post(
                "/auth/v1/token",
                {"refresh_token": session.refresh_token},
                params={"grant_type": "refresh_token"},
            )
        except AuthError as e:
            self._logger.warning("Session refresh failed", extra={"error": str(e)})
            await self._set_session("SIGNED_OUT", None)
            return None
        refreshed = self._session_from_payload(data)
        await self._set_session("TOKEN_REFRESHED", refreshed)
        return refreshed

    async def sign_out(self) -> None:
        token = self.current_access_token()
        if token:
            try:
                response = await self._client.post(
                    f"{self._base_url}/auth/v1/logout",
                    headers={"apikey": self._api_key, "Authorization": f"Bearer {token}"},
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                self._logger.warning("Remote sign-out failed, clearing local session", extra={"error": str(e)})
        await self._set_session("SIGNED_OUT", None)

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _set_session(self, event: str, session: AuthSession | None) -> None:
        self._session = session
        self._logger.info("Auth session updated", extra={"event": event})
        for listener in list(self._listeners):
            await listener(event, session)

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = {"apikey": self._api_key, "Content-Type": "application/json"}
        try:
            response = await self._client.post(url, params=params, json=payload, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Auth provider unreachable", extra={"error": str(e)})
            raise AuthError("Authentication service unavailable") from e

        if response.status_code >= 400:
            message = _error_message(response)
            self._logger.warning(
                "Auth request rejected",
                extra={"reason": f"{path} {response.status_code}", "error": message},
            )
            raise AuthError(message)

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError("Malformed response from authentication service") from e
        if not isinstance(data, dict):
            raise AuthError("Malformed response from authentication service")
        return data

    def _session_from_payload(self, data: dict[str, Any]) -> AuthSession:
        user = data.get("user")
        if not isinstance(user, dict) or "id" not in user:
            raise AuthError("Authentication response without user")
        expires_at = data.get("expires_at")
        if expires_at is None and data.get("expires_in") is not None:
            expires_at = self._clock() + float(data["expires_in"])
        return AuthSession(
            access_token=str(data["access_token"]),
            refresh_token=data.get("refresh_token"),
            expires_at=float(expires_at) if expires_at is not None else None,
            identity=AuthenticatedIdentity.from_user_payload(user),
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return f"HTTP {response.status_code}"
