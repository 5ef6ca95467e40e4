from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from app.domain.entities.identity import AuthSession

# (event, session or None). Events: INITIAL_SESSION, SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED.
AuthStateListener = Callable[[str, "AuthSession | None"], Awaitable[None]]


class AuthPort(ABC):
    @abstractmethod
    async def sign_up(self, email: str, password: str, metadata: dict[str, str]) -> AuthSession | None:
        """
        Register an account. Returns None when the provider requires email
        confirmation before issuing a session. Raises AuthError when rejected.
        """
        raise NotImplementedError

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Raises AuthError on bad credentials."""
        raise NotImplementedError

    @abstractmethod
    async def get_session(self) -> AuthSession | None:
        raise NotImplementedError

    @abstractmethod
    async def sign_out(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        """Subscribe to session changes. Returns an unsubscribe callable."""
        raise NotImplementedError
