from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering
from app.domain.entities.time_slot import is_valid_time_slot


class SessionInvariantError(ValueError):
    """Raised when an update would break the professional/service pairing or slot rules."""


def normalize_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    stripped = notes.strip()
    return stripped or None


@dataclass(frozen=True)
class BookingSession:
    """
    Selections of a single booking attempt.

    Every update returns a new value; an instance never holds a service that
    belongs to a professional other than the selected one.
    """

    professional: Professional | None = None
    service: ServiceOffering | None = None
    date: date | None = None
    time: str | None = None
    notes: str | None = None

    def with_professional(self, professional: Professional) -> "BookingSession":
        if self.professional is not None and self.professional.id == professional.id:
            return replace(self, professional=professional)
        return replace(self, professional=professional, service=None)

    def with_service(self, service: ServiceOffering) -> "BookingSession":
        if self.professional is None:
            raise SessionInvariantError("A professional must be selected before a service")
        if service.professional_id != self.professional.id:
            raise SessionInvariantError(
                f"Service {service.id} belongs to professional {service.professional_id}, "
                f"not {self.professional.id}"
            )
        return replace(self, service=service)

    def with_date(self, value: date) -> "BookingSession":
        return replace(self, date=value)

    def with_time(self, value: str) -> "BookingSession":
        if not is_valid_time_slot(value):
            raise SessionInvariantError(f"Unknown time slot: {value}")
        return replace(self, time=value)

    def with_notes(self, notes: str | None) -> "BookingSession":
        return replace(self, notes=normalize_notes(notes))

    def missing_fields(self) -> list[str]:
        missing = []
        if self.professional is None:
            missing.append("professional")
        if self.service is None:
            missing.append("service")
        if self.date is None:
            missing.append("date")
        if self.time is None:
            missing.append("time")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()
