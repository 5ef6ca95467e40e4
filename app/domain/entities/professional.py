from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Professional:
    id: str
    name: str
    specialty: str
    avatar_url: str | None = None
    active: bool = True
