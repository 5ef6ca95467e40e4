"""
End-to-end wizard flows against the in-memory store and mock auth.
"""

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from app.application.exceptions import (
    ContractViolationError,
    InvalidSelectionError,
    InvalidTransitionError,
    SubmissionInProgressError,
)
from app.domain.entities.appointment import AppointmentDraft
from app.domain.entities.booking_session import BookingSession
from app.domain.entities.service_offering import ServiceOffering
from app.domain.entities.wizard_step import Step
from app.infrastructure.auth.mock_auth import MockAuth
from tests.conftest import BOOKING_DATE


async def _to_notes(wizard, professional_id: str = "1", service_id: str = "1") -> None:
    await wizard.select_professional(professional_id)
    await wizard.select_service(service_id)
    wizard.choose_date(BOOKING_DATE)
    wizard.choose_time("09:00")


@pytest.mark.asyncio
async def test_starts_on_welcome_without_session(make_wizard, store):
    wizard = await make_wizard()

    assert wizard.step == Step.WELCOME
    assert wizard.view().progress == 0
    assert "list_professionals" not in store.calls


@pytest.mark.asyncio
async def test_existing_session_skips_login(make_wizard, auth, accounts, store):
    await auth.sign_up("ada@example.com", "secret123", {"name": "Ada", "phone": "1"})

    wizard = await make_wizard()

    assert wizard.step == Step.PROFESSIONALS
    assert [p.id for p in wizard.view().professionals] == ["3", "2", "1"]
    assert wizard.view().greeting_name == "Ada"


@pytest.mark.asyncio
async def test_booking_scenario_p1_s1(signed_in_wizard, store, notifier):
    wizard = await signed_in_wizard()
    assert wizard.step == Step.PROFESSIONALS

    await wizard.select_professional("1")
    assert wizard.step == Step.SERVICES
    assert [s.name for s in wizard.view().services] == ["Corte Feminino", "Escova"]

    await wizard.select_service("1")
    assert wizard.step == Step.DATETIME
    assert wizard.session.service.duration_minutes == 60

    wizard.choose_date(date(2025, 3, 10))
    assert wizard.step == Step.DATETIME
    assert len(wizard.view().time_slots) == 13

    wizard.choose_time("09:00")
    assert wizard.step == Step.NOTES

    notifier.drain()
    appointment = await wizard.skip_notes()

    assert wizard.step == Step.CONFIRMATION
    assert store.appointments == [appointment]
    assert (appointment.professional_id, appointment.service_id, appointment.date, appointment.time) == (
        "1",
        "1",
        date(2025, 3, 10),
        "09:00",
    )
    session = wizard.session
    assert (session.professional.id, session.service.id, session.date, session.time, session.notes) == (
        "1",
        "1",
        date(2025, 3, 10),
        "09:00",
        None,
    )
    assert [n.level for n in notifier.drain()] == ["success"]


@pytest.mark.asyncio
async def test_submit_keeps_exact_notes(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)

    wizard.set_notes("Prefiro corte mais curto")
    await wizard.submit()

    assert wizard.session.notes == "Prefiro corte mais curto"
    assert store.appointments[0].notes == "Prefiro corte mais curto"


@pytest.mark.asyncio
async def test_skip_notes_equals_blank_notes(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    wizard.set_notes("typed then skipped")

    await wizard.skip_notes()

    assert store.appointments[0].notes is None
    assert wizard.session.notes is None


@pytest.mark.asyncio
async def test_switching_professional_clears_service_and_list(signed_in_wizard):
    wizard = await signed_in_wizard()
    await wizard.select_professional("1")
    await wizard.select_service("1")
    await wizard.back()
    await wizard.back()
    assert wizard.step == Step.PROFESSIONALS
    assert wizard.session.service is not None

    await wizard.select_professional("2")

    assert wizard.session.service is None
    assert {s.professional_id for s in wizard.view().services} == {"2"}


@pytest.mark.asyncio
async def test_late_service_list_for_abandoned_professional_is_discarded(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    gate = store.hold_services("1")

    first = asyncio.create_task(wizard.select_professional("1"))
    await asyncio.sleep(0)
    assert wizard.step == Step.SERVICES
    assert wizard.view().services == ()

    await wizard.back()
    await wizard.select_professional("2")
    assert [s.id for s in wizard.view().services] == ["4", "3"]
    session_before = wizard.session

    gate.set()
    await first

    assert wizard.session == session_before
    assert wizard.session.professional.id == "2"
    assert {s.professional_id for s in wizard.view().services} == {"2"}


@pytest.mark.asyncio
async def test_service_list_cleared_while_new_professional_loads(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    await wizard.select_professional("1")
    await wizard.back()
    gate = store.hold_services("3")

    task = asyncio.create_task(wizard.select_professional("3"))
    await asyncio.sleep(0)
    assert wizard.view().services == ()

    gate.set()
    await task
    assert [s.name for s in wizard.view().services] == ["Coloração", "Luzes"]


@pytest.mark.asyncio
async def test_service_load_failure_notifies_and_stays(signed_in_wizard, store, notifier):
    wizard = await signed_in_wizard()
    notifier.drain()
    store.fail_services = True

    await wizard.select_professional("1")

    assert wizard.step == Step.SERVICES
    assert wizard.view().services == ()
    notices = notifier.drain()
    assert [n.level for n in notices] == ["error"]


@pytest.mark.asyncio
async def test_refresh_failure_keeps_existing_professionals(signed_in_wizard, store, notifier):
    wizard = await signed_in_wizard()
    before = wizard.view().professionals
    store.fail_professionals = True

    await wizard.refresh_professionals()

    assert wizard.view().professionals == before
    assert notifier.drain()[-1].level == "error"


@pytest.mark.asyncio
async def test_professionals_loaded_once(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    await wizard.select_professional("1")
    await wizard.back()

    assert store.calls.count("list_professionals") == 1


@pytest.mark.asyncio
async def test_service_of_other_professional_is_a_contract_violation(signed_in_wizard):
    wizard = await signed_in_wizard()
    await wizard.select_professional("1")
    foreign = ServiceOffering(id="x", name="Barba", duration_minutes=20, price=1, professional_id="2")
    wizard._services = wizard._services + (foreign,)

    with pytest.raises(ContractViolationError):
        await wizard.select_service("x")
    assert wizard.step == Step.SERVICES
    assert wizard.session.service is None


@pytest.mark.asyncio
async def test_unknown_cards_are_rejected(signed_in_wizard):
    wizard = await signed_in_wizard()

    with pytest.raises(InvalidSelectionError):
        await wizard.select_professional("99")
    await wizard.select_professional("1")
    with pytest.raises(InvalidSelectionError):
        await wizard.select_service("3")


@pytest.mark.asyncio
async def test_date_and_time_rules(signed_in_wizard):
    wizard = await signed_in_wizard()
    await wizard.select_professional("1")
    await wizard.select_service("1")

    with pytest.raises(InvalidSelectionError):
        wizard.choose_time("09:00")
    with pytest.raises(InvalidSelectionError):
        wizard.choose_date(date(2025, 3, 1))
    with pytest.raises(InvalidSelectionError):
        wizard.choose_date(date(2025, 3, 9))  # Sunday
    assert wizard.view().time_slots == ()

    wizard.choose_date(BOOKING_DATE)
    with pytest.raises(InvalidSelectionError):
        wizard.choose_time("12:00")
    assert wizard.step == Step.DATETIME


@pytest.mark.asyncio
async def test_failed_insert_keeps_step_and_session(signed_in_wizard, store, notifier):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    wizard.set_notes("allergic to ammonia")
    before = wizard.session
    notifier.drain()
    store.fail_insert = True

    result = await wizard.submit()

    assert result is None
    assert wizard.step == Step.NOTES
    assert wizard.session == before
    assert not wizard.view().submitting
    assert [n.level for n in notifier.drain()] == ["error"]


@pytest.mark.asyncio
async def test_failed_skip_does_not_clear_typed_notes(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    wizard.set_notes("keep me")
    store.fail_profile_lookup = True

    await wizard.skip_notes()

    assert wizard.step == Step.NOTES
    assert wizard.session.notes == "keep me"


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_refused(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    release = asyncio.Event()
    original = store.create_appointment

    async def slow_insert(draft):
        await release.wait()
        return await original(draft)

    store.create_appointment = slow_insert
    first = asyncio.create_task(wizard.submit())
    await asyncio.sleep(0)
    assert wizard.view().submitting

    with pytest.raises(SubmissionInProgressError):
        await wizard.submit()
    with pytest.raises(SubmissionInProgressError):
        await wizard.back()

    release.set()
    await first
    assert wizard.step == Step.CONFIRMATION
    assert len(store.appointments) == 1


@pytest.mark.asyncio
async def test_back_never_mutates_session(signed_in_wizard):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    before = wizard.session

    for expected in (Step.DATETIME, Step.SERVICES, Step.PROFESSIONALS, Step.LOGIN, Step.WELCOME):
        await wizard.back()
        assert wizard.step == expected
        assert wizard.session == before


@pytest.mark.asyncio
async def test_restart_from_confirmation_and_my_bookings(signed_in_wizard, store):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    await wizard.submit()

    wizard.restart()
    assert wizard.step == Step.WELCOME
    assert wizard.session == BookingSession()
    assert wizard.view().services == ()

    await wizard.start()
    await wizard.continue_authenticated()
    await _to_notes(wizard, professional_id="2", service_id="3")
    await wizard.submit()
    await wizard.view_my_bookings()
    assert wizard.step == Step.MY_BOOKINGS
    assert len(wizard.view().bookings) == 2

    wizard.restart()
    assert wizard.step == Step.WELCOME
    assert wizard.session == BookingSession()
    assert wizard.view().bookings == ()


@pytest.mark.asyncio
async def test_restart_only_after_confirmation(signed_in_wizard):
    wizard = await signed_in_wizard()

    with pytest.raises(InvalidTransitionError):
        wizard.restart()


@pytest.mark.asyncio
async def test_my_bookings_failure_notifies(signed_in_wizard, store, notifier):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    await wizard.submit()
    notifier.drain()
    store.fail_profile_lookup = True

    await wizard.view_my_bookings()

    assert wizard.step == Step.MY_BOOKINGS
    assert wizard.view().bookings == ()
    assert [n.level for n in notifier.drain()] == ["error"]


@pytest.mark.asyncio
async def test_sign_in_rejection_stays_on_login(make_wizard, notifier):
    wizard = await make_wizard()
    await wizard.start()

    await wizard.sign_in("ghost@example.com", "wrongpass")

    assert wizard.step == Step.LOGIN
    assert wizard.identity is None
    assert notifier.drain()[-1].title == "Sign-in failed"


@pytest.mark.asyncio
async def test_sign_up_form_validation(make_wizard, store):
    wizard = await make_wizard()
    await wizard.start()

    with pytest.raises(InvalidSelectionError):
        await wizard.sign_up("", "ada@example.com", "1", "secret123")
    with pytest.raises(InvalidSelectionError):
        await wizard.sign_up("Ada", "not-an-email", "1", "secret123")
    with pytest.raises(InvalidSelectionError):
        await wizard.sign_up("Ada", "ada@example.com", "1", "123")
    assert wizard.step == Step.LOGIN


@pytest.mark.asyncio
async def test_duplicate_sign_up_is_reported(make_wizard, auth, notifier):
    await auth.sign_up("ada@example.com", "secret123", {"name": "Ada", "phone": "1"})
    await auth.sign_out()
    wizard = await make_wizard()
    await wizard.start()

    await wizard.sign_up("Ada", "ada@example.com", "1", "secret123")

    assert wizard.step == Step.LOGIN
    assert notifier.drain()[-1].level == "error"


@pytest.mark.asyncio
async def test_sign_up_pending_confirmation(make_wizard, accounts, notifier):
    wizard = await make_wizard(auth=MockAuth(directory=accounts, require_email_confirmation=True))
    await wizard.start()

    await wizard.sign_up("Ada", "ada@example.com", "1", "secret123")

    assert wizard.step == Step.LOGIN
    assert notifier.drain()[-1].level == "info"


@pytest.mark.asyncio
async def test_auth_event_advances_from_welcome(make_wizard, auth, accounts):
    wizard = await make_wizard()
    assert wizard.step == Step.WELCOME

    await auth.sign_up("ada@example.com", "secret123", {"name": "Ada", "phone": "1"})

    assert wizard.step == Step.PROFESSIONALS
    assert wizard.identity.email == "ada@example.com"


@pytest.mark.asyncio
async def test_auth_event_mid_flow_keeps_step_and_session(signed_in_wizard, auth):
    wizard = await signed_in_wizard()
    await wizard.select_professional("1")
    await wizard.select_service("1")
    before = wizard.session

    await auth.sign_in_with_password("ada@example.com", "secret123")

    assert wizard.step == Step.DATETIME
    assert wizard.session == before


@pytest.mark.asyncio
async def test_signed_out_user_cannot_submit(signed_in_wizard, auth, store, notifier):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    await auth.sign_out()
    assert wizard.identity is None
    notifier.drain()

    await wizard.submit()

    assert wizard.step == Step.NOTES
    assert "create_appointment" not in store.calls
    assert notifier.drain()[-1].level == "error"


@pytest.mark.asyncio
async def test_continue_requires_identity(make_wizard):
    wizard = await make_wizard()
    await wizard.start()

    with pytest.raises(InvalidTransitionError):
        await wizard.continue_authenticated()


@pytest.mark.asyncio
async def test_closed_wizard_ignores_auth_events(make_wizard, auth):
    wizard = await make_wizard()
    wizard.close()

    await auth.sign_up("ada@example.com", "secret123", {"name": "Ada", "phone": "1"})

    assert wizard.step == Step.WELCOME
    assert wizard.identity is None


@pytest.mark.asyncio
async def test_refresh_bookings_picks_up_new_appointments(signed_in_wizard, store, notifier):
    wizard = await signed_in_wizard()
    await _to_notes(wizard)
    first = await wizard.submit()
    await wizard.view_my_bookings()
    assert len(wizard.view().bookings) == 1

    await store.create_appointment(
        AppointmentDraft(
            client_id=first.client_id,
            professional_id="2",
            service_id="4",
            date=BOOKING_DATE,
            time="14:00",
        )
    )
    await wizard.refresh_bookings()

    assert wizard.step == Step.MY_BOOKINGS
    assert [a.time for a in wizard.view().bookings] == ["14:00", "09:00"]

    notifier.drain()
    store.fail_profile_lookup = True
    await wizard.refresh_bookings()

    assert len(wizard.view().bookings) == 2
    assert [n.level for n in notifier.drain()] == ["error"]


@pytest.mark.asyncio
async def test_refresh_bookings_requires_my_bookings(signed_in_wizard):
    wizard = await signed_in_wizard()

    with pytest.raises(InvalidTransitionError):
        await wizard.refresh_bookings()
