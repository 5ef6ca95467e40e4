from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from app.application.exceptions import (
    AuthError,
    ContractViolationError,
    InvalidSelectionError,
    InvalidTransitionError,
    LoadError,
    ProfileResolutionError,
    SubmissionError,
    SubmissionInProgressError,
)
from app.application.ports.auth import AuthPort
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.notifier import NotifierPort
from app.application.use_cases.authenticate import AuthenticateUseCase
from app.application.use_cases.load_catalog import CatalogLoader
from app.application.use_cases.step_controller import StepController
from app.application.use_cases.submit_booking import SubmitBookingUseCase
from app.domain.entities.appointment import Appointment
from app.domain.entities.booking_session import BookingSession, SessionInvariantError
from app.domain.entities.identity import AuthenticatedIdentity, AuthSession
from app.domain.entities.notice import Notice
from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering
from app.domain.entities.time_slot import TIME_SLOTS, is_bookable_date
from app.domain.entities.wizard_step import PROGRESS_PERCENT, Step


@dataclass(frozen=True)
class WizardView:
    step: Step
    progress: int
    greeting_name: str | None
    session: BookingSession
    professionals: tuple[Professional, ...]
    services: tuple[ServiceOffering, ...]
    time_slots: tuple[str, ...]
    bookings: tuple[Appointment, ...]
    submitting: bool
    last_appointment: Appointment | None


class BookingWizard:
    """
    One user's booking flow.

    Every action checks the current step, then produces a new BookingSession
    value. Store and auth failures become notices; caller mistakes (wrong step,
    unknown card, bad date) raise.
    """

    def __init__(
        self,
        store: BookingStorePort,
        auth: AuthPort,
        notifier: NotifierPort,
        today: Callable[[], date] = date.today,
        session_id: str | None = None,
    ) -> None:
        self._auth = auth
        self._notifier = notifier
        self._today = today
        self._session_id = session_id
        self._loader = CatalogLoader(store)
        self._submitter = SubmitBookingUseCase(store)
        self._authenticator = AuthenticateUseCase(auth)
        self._logger = logging.getLogger(__name__)

        self._controller = StepController()
        self._session = BookingSession()
        self._identity: AuthenticatedIdentity | None = None
        self._professionals: tuple[Professional, ...] = ()
        self._professionals_loaded = False
        self._services: tuple[ServiceOffering, ...] = ()
        self._services_professional_id: str | None = None
        self._bookings: tuple[Appointment, ...] = ()
        self._last_appointment: Appointment | None = None
        self._submitting = False
        self._unsubscribe: Callable[[], None] | None = None

    async def initialize(self) -> "BookingWizard":
        current = await self._auth.get_session()
        if current is not None:
            self._identity = current.identity
        self._controller = StepController(authenticated=self._identity is not None)
        self._unsubscribe = self._auth.on_auth_state_change(self._handle_auth_event)
        if self._controller.step == Step.PROFESSIONALS:
            await self._enter_professionals()
        return self

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def step(self) -> Step:
        return self._controller.step

    @property
    def session(self) -> BookingSession:
        return self._session

    @property
    def identity(self) -> AuthenticatedIdentity | None:
        return self._identity

    @property
    def notifier(self) -> NotifierPort:
        return self._notifier

    def view(self) -> WizardView:
        return WizardView(
            step=self.step,
            progress=PROGRESS_PERCENT[self.step],
            greeting_name=self._identity.name if self._identity else None,
            session=self._session,
            professionals=self._professionals,
            services=self._services,
            time_slots=TIME_SLOTS if self._session.date is not None else (),
            bookings=self._bookings,
            submitting=self._submitting,
            last_appointment=self._last_appointment,
        )

    # Navigation

    async def start(self) -> None:
        self._require(Step.WELCOME)
        self._controller.advance(Step.LOGIN)

    async def back(self) -> None:
        self._require(*_BACKABLE)
        target = self._controller.back()
        if target == Step.PROFESSIONALS:
            await self._enter_professionals()
        elif target == Step.SERVICES and self._session.professional is not None:
            await self._load_services(self._session.professional.id)

    def restart(self) -> None:
        self._require(Step.CONFIRMATION, Step.MY_BOOKINGS)
        if self._controller.advance(Step.WELCOME):
            self._session = BookingSession()
            self._services = ()
            self._services_professional_id = None
            self._bookings = ()
            self._last_appointment = None
            self._logger.info("Booking session reset", extra={"session_id": self._session_id})

    # Authentication

    async def sign_up(self, name: str, email: str, phone: str, password: str) -> None:
        self._require(Step.LOGIN)
        try:
            auth_session = await self._authenticator.sign_up(name, email, phone, password)
        except AuthError as e:
            self._notify_error("Sign-up failed", e)
            return
        if auth_session is None:
            self._notifier.notify(
                Notice(level="info", title="Confirm your email", message="We sent you a confirmation link.")
            )
            return
        await self._on_authenticated(auth_session)

    async def sign_in(self, email: str, password: str) -> None:
        self._require(Step.LOGIN)
        try:
            auth_session = await self._authenticator.sign_in(email, password)
        except AuthError as e:
            self._notify_error("Sign-in failed", e)
            return
        await self._on_authenticated(auth_session)

    async def continue_authenticated(self) -> None:
        self._require(Step.LOGIN)
        if self._identity is None:
            raise InvalidTransitionError("Sign in before continuing")
        self._controller.advance(Step.PROFESSIONALS)
        await self._enter_professionals()

    async def _handle_auth_event(self, event: str, auth_session: AuthSession | None) -> None:
        self._logger.info("Auth state changed", extra={"event": event, "session_id": self._session_id})
        if event == "SIGNED_OUT" or auth_session is None:
            self._identity = None
            return
        await self._on_authenticated(auth_session)

    async def _on_authenticated(self, auth_session: AuthSession) -> None:
        self._identity = auth_session.identity
        if self._controller.advance_on_authentication():
            await self._enter_professionals()

    # Catalog

    async def refresh_professionals(self) -> None:
        self._require(Step.PROFESSIONALS)
        await self._enter_professionals(force=True)

    async def select_professional(self, professional_id: str) -> None:
        self._require(Step.PROFESSIONALS)
        professional = next((p for p in self._professionals if p.id == professional_id), None)
        if professional is None:
            raise InvalidSelectionError(f"Unknown professional: {professional_id}")
        self._session = self._session.with_professional(professional)
        self._controller.advance(Step.SERVICES)
        await self._load_services(professional.id)

    async def select_service(self, service_id: str) -> None:
        self._require(Step.SERVICES)
        service = next((s for s in self._services if s.id == service_id), None)
        if service is None:
            raise InvalidSelectionError(f"Unknown service: {service_id}")
        try:
            self._session = self._session.with_service(service)
        except SessionInvariantError as e:
            raise ContractViolationError(str(e)) from e
        self._controller.advance(Step.DATETIME)

    async def _enter_professionals(self, force: bool = False) -> None:
        if self._professionals_loaded and not force:
            return
        try:
            professionals = await self._loader.load_professionals()
        except LoadError as e:
            self._notify_error("Could not load professionals", e)
            return
        self._professionals = professionals
        self._professionals_loaded = True

    async def _load_services(self, professional_id: str) -> None:
        if self._services_professional_id != professional_id:
            self._services = ()
            self._services_professional_id = professional_id
        try:
            services = await self._loader.load_services(professional_id)
        except LoadError as e:
            if self._is_current_professional(professional_id):
                self._notify_error("Could not load services", e)
            return
        if not self._is_current_professional(professional_id):
            self._logger.info(
                "Discarding stale service list",
                extra={"professional_id": professional_id, "session_id": self._session_id},
            )
            return
        self._services = services
        self._services_professional_id = professional_id

    def _is_current_professional(self, professional_id: str) -> bool:
        current = self._session.professional
        return current is not None and current.id == professional_id

    # Date, time and notes

    def choose_date(self, value: date) -> None:
        self._require(Step.DATETIME)
        if not is_bookable_date(value, self._today()):
            raise InvalidSelectionError(f"{value.isoformat()} is not available for booking")
        self._session = self._session.with_date(value)

    def choose_time(self, slot: str) -> None:
        self._require(Step.DATETIME)
        if self._session.date is None:
            raise InvalidSelectionError("Choose a date before picking a time")
        try:
            self._session = self._session.with_time(slot)
        except SessionInvariantError as e:
            raise InvalidSelectionError(str(e)) from e
        self._controller.advance(Step.NOTES)

    def set_notes(self, notes: str | None) -> None:
        self._require(Step.NOTES)
        self._session = self._session.with_notes(notes)

    # Submission

    async def submit(self) -> Appointment | None:
        return await self._submit(self._session.notes)

    async def skip_notes(self) -> Appointment | None:
        return await self._submit(None)

    async def _submit(self, notes: str | None) -> Appointment | None:
        self._require(Step.NOTES)
        self._submitting = True
        try:
            result = await self._submitter.execute(self._identity, self._session, notes)
        except (AuthError, ProfileResolutionError, SubmissionError) as e:
            self._notify_error("Booking failed", e)
            return None
        finally:
            self._submitting = False

        self._session = result.session
        self._last_appointment = result.appointment
        self._controller.advance(Step.CONFIRMATION)
        self._notifier.notify(Notice(level="success", title="Booking confirmed", message="Your appointment is booked."))
        return result.appointment

    # My bookings

    async def view_my_bookings(self) -> None:
        self._require(Step.CONFIRMATION)
        self._controller.advance(Step.MY_BOOKINGS)
        await self._load_bookings()

    async def refresh_bookings(self) -> None:
        self._require(Step.MY_BOOKINGS)
        await self._load_bookings()

    async def _load_bookings(self) -> None:
        if self._identity is None:
            self._bookings = ()
            return
        try:
            self._bookings = await self._loader.load_appointments(self._identity.user_id)
        except LoadError as e:
            self._notify_error("Could not load your bookings", e)

    # Helpers

    def _require(self, *steps: Step) -> None:
        if self._submitting:
            raise SubmissionInProgressError("A booking is being submitted")
        self._controller.require(*steps)

    def _notify_error(self, title: str, error: Exception) -> None:
        self._logger.warning(title, extra={"error": str(error), "session_id": self._session_id})
        self._notifier.notify(Notice(level="error", title=title, message=str(error)))


_BACKABLE = (Step.LOGIN, Step.PROFESSIONALS, Step.SERVICES, Step.DATETIME, Step.NOTES)
