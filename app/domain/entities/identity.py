from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AuthenticatedIdentity:
    user_id: str
    name: str = ""
    email: str = ""
    phone: str | None = None

    @staticmethod
    def from_user_payload(user: dict[str, Any]) -> "AuthenticatedIdentity":
        metadata = user.get("user_metadata") or {}
        email = str(user.get("email") or metadata.get("email") or "").strip()
        name = str(metadata.get("name") or metadata.get("full_name") or "").strip()
        phone = metadata.get("phone") or user.get("phone") or None
        return AuthenticatedIdentity(
            user_id=str(user["id"]),
            name=name or email.split("@")[0],
            email=email,
            phone=str(phone).strip() if phone else None,
        )


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    identity: AuthenticatedIdentity
    refresh_token: str | None = None
    expires_at: float | None = None
