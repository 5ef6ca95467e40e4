from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientProfile:
    id: str
    user_id: str  # auth user id, unique per profile
    name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class ClientProfileDraft:
    user_id: str
    name: str
    email: str
    phone: str | None = None
