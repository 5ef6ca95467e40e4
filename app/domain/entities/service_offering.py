from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ServiceOffering:
    id: str
    name: str
    duration_minutes: int
    price: Decimal
    professional_id: str  # owning professional
    description: str | None = None
    active: bool = True
