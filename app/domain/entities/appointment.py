from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class AppointmentDraft:
    client_id: str
    professional_id: str
    service_id: str
    date: date
    time: str  # HH:MM, one of TIME_SLOTS
    notes: str | None = None

    @property
    def date_iso(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class Appointment:
    id: str
    client_id: str
    professional_id: str
    service_id: str
    date: date
    time: str
    notes: str | None = None
    created_at: datetime | None = None
