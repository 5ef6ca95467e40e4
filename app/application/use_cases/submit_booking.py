from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.exceptions import (
    AuthError,
    IncompleteBookingError,
    ProfileResolutionError,
    StoreUpstreamError,
    SubmissionError,
)
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.appointment import Appointment, AppointmentDraft
from app.domain.entities.booking_session import BookingSession, normalize_notes
from app.domain.entities.client_profile import ClientProfile, ClientProfileDraft
from app.domain.entities.identity import AuthenticatedIdentity


@dataclass(frozen=True)
class SubmissionResult:
    appointment: Appointment
    profile: ClientProfile
    session: BookingSession  # the session exactly as submitted


class SubmitBookingUseCase:
    """The only write path: resolve the client profile, then insert one appointment."""

    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        identity: AuthenticatedIdentity | None,
        session: BookingSession,
        notes: str | None = None,
    ) -> SubmissionResult:
        """
        Persist the booking described by session, using notes as the final notes text.

        Nothing is written unless identity is present and the session is complete.
        Raises AuthError, IncompleteBookingError, ProfileResolutionError or SubmissionError.
        """
        if identity is None:
            raise AuthError("You need to sign in before booking")
        missing = session.missing_fields()
        if missing:
            raise IncompleteBookingError(f"Missing booking fields: {', '.join(missing)}")

        submitted = session.with_notes(normalize_notes(notes))
        profile = await self._resolve_profile(identity)

        draft = AppointmentDraft(
            client_id=profile.id,
            professional_id=submitted.professional.id,
            service_id=submitted.service.id,
            date=submitted.date,
            time=submitted.time,
            notes=submitted.notes,
        )
        try:
            appointment = await self._store.create_appointment(draft)
        except StoreUpstreamError as e:
            self._logger.error("Error creating appointment", extra={"error": str(e)})
            raise SubmissionError("Could not save your booking, please try again") from e

        self._logger.info(
            "Appointment created",
            extra={
                "appointment_id": appointment.id,
                "professional_id": draft.professional_id,
                "service_id": draft.service_id,
            },
        )
        return SubmissionResult(appointment=appointment, profile=profile, session=submitted)

    async def _resolve_profile(self, identity: AuthenticatedIdentity) -> ClientProfile:
        try:
            profile = await self._store.get_profile_by_user_id(identity.user_id)
            if profile is not None:
                return profile
            profile = await self._store.ensure_profile(
                ClientProfileDraft(
                    user_id=identity.user_id,
                    name=identity.name,
                    email=identity.email,
                    phone=identity.phone,
                )
            )
        except StoreUpstreamError as e:
            self._logger.error("Error resolving client profile", extra={"error": str(e)})
            raise ProfileResolutionError("Could not load your client profile") from e
        self._logger.info("Client profile resolved", extra={"reason": "ensure_profile"})
        return profile
