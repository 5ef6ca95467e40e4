from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.v1.schemas import (
    DateRequestSchema,
    NotesRequestSchema,
    SignInRequestSchema,
    SignUpRequestSchema,
    TimeRequestSchema,
    WizardViewSchema,
)
from app.application.exceptions import (
    InvalidSelectionError,
    InvalidTransitionError,
    SubmissionInProgressError,
    UnknownSessionError,
)
from app.application.use_cases.booking_wizard import BookingWizard
from app.wiring.dependencies import create_wizard, get_wizard_sessions

router = APIRouter(prefix="/api/v1/booking")
logger = logging.getLogger(__name__)


def get_session_wizard(session_id: str) -> BookingWizard:
    try:
        return get_wizard_sessions().require(session_id)
    except UnknownSessionError:
        raise HTTPException(status_code=404, detail="Unknown booking session")


@contextmanager
def caller_errors() -> Iterator[None]:
    try:
        yield
    except (InvalidTransitionError, SubmissionInProgressError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidSelectionError as e:
        raise HTTPException(status_code=422, detail=str(e))


def render(session_id: str, wizard: BookingWizard) -> WizardViewSchema:
    return WizardViewSchema.from_view(session_id, wizard.view(), wizard.notifier.drain())


@router.post("/sessions", response_model=WizardViewSchema, status_code=201)
async def create_session() -> WizardViewSchema:
    session_id = uuid.uuid4().hex
    wizard = await create_wizard(session_id)
    return render(session_id, wizard)


@router.get("/sessions/{session_id}", response_model=WizardViewSchema)
async def get_session(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    return render(session_id, wizard)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str) -> Response:
    wizard = get_wizard_sessions().discard(session_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Unknown booking session")
    wizard.close()
    logger.info("Wizard session closed", extra={"session_id": session_id})
    return Response(status_code=204)


@router.post("/sessions/{session_id}/start", response_model=WizardViewSchema)
async def start(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    with caller_errors():
        await wizard.start()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/back", response_model=WizardViewSchema)
async def back(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    with caller_errors():
        await wizard.back()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/sign-up", response_model=WizardViewSchema)
async def sign_up(
    session_id: str,
    req: SignUpRequestSchema,
    wizard: BookingWizard = Depends(get_session_wizard),
) -> WizardViewSchema:
    with caller_errors():
        await wizard.sign_up(req.name, req.email, req.phone, req.password)
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/sign-in", response_model=WizardViewSchema)
async def sign_in(
    session_id: str,
    req: SignInRequestSchema,
    wizard: BookingWizard = Depends(get_session_wizard),
) -> WizardViewSchema:
    with caller_errors():
        await wizard.sign_in(req.email, req.password)
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/continue", response_model=WizardViewSchema)
async def continue_authenticated(
    session_id: str, wizard: BookingWizard = Depends(get_session_wizard)
) -> WizardViewSchema:
    with caller_errors():
        await wizard.continue_authenticated()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/refresh-professionals", response_model=WizardViewSchema)
async def refresh_professionals(
    session_id: str, wizard: BookingWizard = Depends(get_session_wizard)
) -> WizardViewSchema:
    with caller_errors():
        await wizard.refresh_professionals()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/professionals/{professional_id}", response_model=WizardViewSchema)
async def select_professional(
    session_id: str,
    professional_id: str,
    wizard: BookingWizard = Depends(get_session_wizard),
) -> WizardViewSchema:
    with caller_errors():
        await wizard.select_professional(professional_id)
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/services/{service_id}", response_model=WizardViewSchema)
async def select_service(
    session_id: str,
    service_id: str,
    wizard: BookingWizard = Depends(get_session_wizard),
) -> WizardViewSchema:
    with caller_errors():
        await wizard.select_service(service_id)
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/date", response_model=WizardViewSchema)
async def choose_date(
    session_id: str,
    req: DateRequestSchema,
    wizard: BookingWizard = Depends(get_session_wizard),
) -> WizardViewSchema:
    with caller_errors():
        wizard.choose_date(req.date)
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/time", response_model=WizardViewSchema)
async def choose_time(
    session_id: str,
    req: TimeRequestSchema,
    wizard: BookingWizard = Depends(get_session_wizard),
) -> WizardViewSchema:
    with caller_errors():
        wizard.choose_time(req.time)
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/notes", response_model=WizardViewSchema)
async def set_notes(
    session_id: str,
    req: NotesRequestSchema,
    wizard: BookingWizard = Depends(get_session_wizard),
) -> WizardViewSchema:
    with caller_errors():
        wizard.set_notes(req.notes)
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/submit", response_model=WizardViewSchema)
async def submit(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    with caller_errors():
        await wizard.submit()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/skip-notes", response_model=WizardViewSchema)
async def skip_notes(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    with caller_errors():
        await wizard.skip_notes()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/my-bookings", response_model=WizardViewSchema)
async def my_bookings(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    with caller_errors():
        await wizard.view_my_bookings()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/my-bookings/refresh", response_model=WizardViewSchema)
async def refresh_bookings(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    with caller_errors():
        await wizard.refresh_bookings()
    return render(session_id, wizard)


@router.post("/sessions/{session_id}/restart", response_model=WizardViewSchema)
async def restart(session_id: str, wizard: BookingWizard = Depends(get_session_wizard)) -> WizardViewSchema:
    with caller_errors():
        wizard.restart()
    return render(session_id, wizard)
