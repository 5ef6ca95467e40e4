from __future__ import annotations

import logging
import re

from app.application.exceptions import InvalidSelectionError
from app.application.ports.auth import AuthPort
from app.domain.entities.identity import AuthSession

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _required(**fields: str) -> dict[str, str]:
    cleaned = {key: (value or "").strip() for key, value in fields.items()}
    missing = [key for key, value in cleaned.items() if not value]
    if missing:
        raise InvalidSelectionError(f"Required fields missing: {', '.join(missing)}")
    return cleaned


class AuthenticateUseCase:
    def __init__(self, auth: AuthPort) -> None:
        self._auth = auth
        self._logger = logging.getLogger(__name__)

    async def sign_up(self, name: str, email: str, phone: str, password: str) -> AuthSession | None:
        fields = _required(name=name, email=email, phone=phone)
        if not password:
            raise InvalidSelectionError("Required fields missing: password")
        if not EMAIL_RE.match(fields["email"]):
            raise InvalidSelectionError("Invalid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidSelectionError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")

        session = await self._auth.sign_up(
            fields["email"].lower(),
            password,
            {"name": fields["name"], "phone": fields["phone"]},
        )
        self._logger.info("Sign-up completed", extra={"reason": "session" if session else "confirmation pending"})
        return session

    async def sign_in(self, email: str, password: str) -> AuthSession:
        fields = _required(email=email)
        if not password:
            raise InvalidSelectionError("Required fields missing: password")
        session = await self._auth.sign_in_with_password(fields["email"].lower(), password)
        self._logger.info("Sign-in completed")
        return session
