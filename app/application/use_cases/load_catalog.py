from __future__ import annotations

import logging

from app.application.exceptions import LoadError, StoreUpstreamError
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.appointment import Appointment
from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering


class CatalogLoader:
    """Read side of the wizard: professionals, services and a client's appointments."""

    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    async def load_professionals(self) -> tuple[Professional, ...]:
        try:
            rows = await self._store.list_professionals()
        except StoreUpstreamError as e:
            self._logger.error("Error loading professionals", extra={"error": str(e)})
            raise LoadError("Could not load professionals") from e
        return tuple(p for p in rows if p.active)

    async def load_services(self, professional_id: str) -> tuple[ServiceOffering, ...]:
        try:
            rows = await self._store.list_services(professional_id)
        except StoreUpstreamError as e:
            self._logger.error(
                "Error loading services",
                extra={"professional_id": professional_id, "error": str(e)},
            )
            raise LoadError("Could not load services") from e
        return tuple(s for s in rows if s.active and s.professional_id == professional_id)

    async def load_appointments(self, user_id: str) -> tuple[Appointment, ...]:
        """Appointments of the profile linked to user_id; empty if there is no profile yet."""
        try:
            profile = await self._store.get_profile_by_user_id(user_id)
            if profile is None:
                return ()
            rows = await self._store.list_appointments(profile.id)
        except StoreUpstreamError as e:
            self._logger.error("Error loading appointments", extra={"error": str(e)})
            raise LoadError("Could not load your bookings") from e
        return tuple(rows)
