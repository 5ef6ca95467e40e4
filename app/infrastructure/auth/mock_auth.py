from __future__ import annotations

import logging
import uuid
from typing import Callable

from app.application.exceptions import AuthError
from app.application.ports.auth import AuthPort, AuthStateListener
from app.domain.entities.identity import AuthenticatedIdentity, AuthSession


class MockAccountDirectory:
    """Accounts shared by every MockAuth in the process: email -> (password, identity)."""

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, AuthenticatedIdentity]] = {}


class MockAuth(AuthPort):
    def __init__(
        self,
        directory: MockAccountDirectory | None = None,
        require_email_confirmation: bool = False,
    ) -> None:
        self._directory = directory or MockAccountDirectory()
        self._require_confirmation = require_email_confirmation
        self._session: AuthSession | None = None
        self._listeners: list[AuthStateListener] = []
        self._logger = logging.getLogger(__name__)

    async def sign_up(self, email: str, password: str, metadata: dict[str, str]) -> AuthSession | None:
        if email in self._directory.accounts:
            raise AuthError("User already registered")
        identity = AuthenticatedIdentity(
            user_id=str(uuid.uuid4()),
            name=metadata.get("name", ""),
            email=email,
            phone=metadata.get("phone") or None,
        )
        self._directory.accounts[email] = (password, identity)
        self._logger.info("Mock account created")
        if self._require_confirmation:
            return None
        return await self._start_session(identity)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        account = self._directory.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthError("Invalid login credentials")
        return await self._start_session(account[1])

    async def get_session(self) -> AuthSession | None:
        return self._session

    async def sign_out(self) -> None:
        self._session = None
        await self._emit("SIGNED_OUT", None)

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _start_session(self, identity: AuthenticatedIdentity) -> AuthSession:
        self._session = AuthSession(access_token=f"mock_token_{uuid.uuid4().hex}", identity=identity)
        await self._emit("SIGNED_IN", self._session)
        return self._session

    async def _emit(self, event: str, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            await listener(event, session)
