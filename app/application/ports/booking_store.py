from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.appointment import Appointment, AppointmentDraft
from app.domain.entities.client_profile import ClientProfile, ClientProfileDraft
from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering


class BookingStorePort(ABC):
    """
    Remote table store holding professionals, services, profiles and appointments.

    Implementations raise StoreUpstreamError for any transport or backend failure.
    """

    @abstractmethod
    async def list_professionals(self) -> list[Professional]:
        """Active professionals ordered by name ascending."""
        raise NotImplementedError

    @abstractmethod
    async def list_services(self, professional_id: str) -> list[ServiceOffering]:
        """Active services of one professional ordered by name ascending."""
        raise NotImplementedError

    @abstractmethod
    async def get_profile_by_user_id(self, user_id: str) -> ClientProfile | None:
        raise NotImplementedError

    @abstractmethod
    async def ensure_profile(self, draft: ClientProfileDraft) -> ClientProfile:
        """
        Insert the profile unless one already exists for draft.user_id.

        Must be atomic on user_id: concurrent callers all get the same row back.
        """
        raise NotImplementedError

    @abstractmethod
    async def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    async def list_appointments(self, client_id: str) -> list[Appointment]:
        """Appointments of one client, newest date/time first."""
        raise NotImplementedError
