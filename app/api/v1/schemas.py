import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from app.application.use_cases.booking_wizard import WizardView
from app.domain.entities.appointment import Appointment
from app.domain.entities.notice import Notice
from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering


class ProfessionalSchema(BaseModel):
    id: str
    name: str
    specialty: str
    avatar_url: str | None = None

    @staticmethod
    def from_entity(p: Professional) -> "ProfessionalSchema":
        return ProfessionalSchema(id=p.id, name=p.name, specialty=p.specialty, avatar_url=p.avatar_url)


class ServiceSchema(BaseModel):
    id: str
    name: str
    description: str | None = None
    duration_minutes: int
    price: Decimal
    professional_id: str

    @staticmethod
    def from_entity(s: ServiceOffering) -> "ServiceSchema":
        return ServiceSchema(
            id=s.id,
            name=s.name,
            description=s.description,
            duration_minutes=s.duration_minutes,
            price=s.price,
            professional_id=s.professional_id,
        )


class AppointmentSchema(BaseModel):
    id: str
    professional_id: str
    service_id: str
    date: dt.date
    time: str
    notes: str | None = None
    created_at: dt.datetime | None = None

    @staticmethod
    def from_entity(a: Appointment) -> "AppointmentSchema":
        return AppointmentSchema(
            id=a.id,
            professional_id=a.professional_id,
            service_id=a.service_id,
            date=a.date,
            time=a.time,
            notes=a.notes,
            created_at=a.created_at,
        )


class BookingSessionSchema(BaseModel):
    professional: ProfessionalSchema | None = None
    service: ServiceSchema | None = None
    date: dt.date | None = None
    time: str | None = None
    notes: str | None = None


class NoticeSchema(BaseModel):
    level: str
    title: str
    message: str = ""


class WizardViewSchema(BaseModel):
    session_id: str
    step: str
    progress: int
    greeting_name: str | None = None
    booking: BookingSessionSchema
    professionals: list[ProfessionalSchema] = Field(default_factory=list)
    services: list[ServiceSchema] = Field(default_factory=list)
    time_slots: list[str] = Field(default_factory=list)
    bookings: list[AppointmentSchema] = Field(default_factory=list)
    submitting: bool = False
    last_appointment: AppointmentSchema | None = None
    notices: list[NoticeSchema] = Field(default_factory=list)

    @staticmethod
    def from_view(session_id: str, view: WizardView, notices: list[Notice]) -> "WizardViewSchema":
        session = view.session
        return WizardViewSchema(
            session_id=session_id,
            step=view.step.value,
            progress=view.progress,
            greeting_name=view.greeting_name,
            booking=BookingSessionSchema(
                professional=ProfessionalSchema.from_entity(session.professional) if session.professional else None,
                service=ServiceSchema.from_entity(session.service) if session.service else None,
                date=session.date,
                time=session.time,
                notes=session.notes,
            ),
            professionals=[ProfessionalSchema.from_entity(p) for p in view.professionals],
            services=[ServiceSchema.from_entity(s) for s in view.services],
            time_slots=list(view.time_slots),
            bookings=[AppointmentSchema.from_entity(a) for a in view.bookings],
            submitting=view.submitting,
            last_appointment=(
                AppointmentSchema.from_entity(view.last_appointment) if view.last_appointment else None
            ),
            notices=[NoticeSchema(level=n.level, title=n.title, message=n.message) for n in notices],
        )


class SignUpRequestSchema(BaseModel):
    name: str
    email: str
    phone: str
    password: str


class SignInRequestSchema(BaseModel):
    email: str
    password: str


class DateRequestSchema(BaseModel):
    date: dt.date


class TimeRequestSchema(BaseModel):
    time: str


class NotesRequestSchema(BaseModel):
    notes: str | None = None
