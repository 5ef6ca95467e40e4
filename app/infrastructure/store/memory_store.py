from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.appointment import Appointment, AppointmentDraft
from app.domain.entities.client_profile import ClientProfile, ClientProfileDraft
from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering


class MemoryBookingStore(BookingStorePort):
    """Process-local store used in dev and tests. Shared by all wizard sessions."""

    def __init__(
        self,
        professionals: Iterable[Professional] = (),
        services: Iterable[ServiceOffering] = (),
    ) -> None:
        self._professionals: dict[str, Professional] = {p.id: p for p in professionals}
        self._services: dict[str, ServiceOffering] = {s.id: s for s in services}
        self._profiles: dict[str, ClientProfile] = {}  # keyed by user_id
        self._appointments: list[Appointment] = []
        self._logger = logging.getLogger(__name__)

    @property
    def appointments(self) -> list[Appointment]:
        return list(self._appointments)

    @property
    def profiles(self) -> list[ClientProfile]:
        return list(self._profiles.values())

    async def list_professionals(self) -> list[Professional]:
        rows = [p for p in self._professionals.values() if p.active]
        return sorted(rows, key=lambda p: p.name)

    async def list_services(self, professional_id: str) -> list[ServiceOffering]:
        rows = [s for s in self._services.values() if s.active and s.professional_id == professional_id]
        return sorted(rows, key=lambda s: s.name)

    async def get_profile_by_user_id(self, user_id: str) -> ClientProfile | None:
        return self._profiles.get(user_id)

    async def ensure_profile(self, draft: ClientProfileDraft) -> ClientProfile:
        existing = self._profiles.get(draft.user_id)
        if existing is not None:
            return existing
        profile = ClientProfile(
            id=f"profile_{len(self._profiles) + 1}",
            user_id=draft.user_id,
            name=draft.name,
            email=draft.email,
            phone=draft.phone,
        )
        self._profiles[draft.user_id] = profile
        return profile

    async def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        appointment = Appointment(
            id=f"appointment_{len(self._appointments) + 1}",
            client_id=draft.client_id,
            professional_id=draft.professional_id,
            service_id=draft.service_id,
            date=draft.date,
            time=draft.time,
            notes=draft.notes,
            created_at=datetime.now(timezone.utc),
        )
        self._appointments.append(appointment)
        self._logger.info(
            "Memory appointment stored",
            extra={"appointment_id": appointment.id, "professional_id": draft.professional_id},
        )
        return appointment

    async def list_appointments(self, client_id: str) -> list[Appointment]:
        rows = [a for a in self._appointments if a.client_id == client_id]
        return sorted(rows, key=lambda a: (a.date, a.time), reverse=True)
