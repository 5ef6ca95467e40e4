from datetime import date, datetime
from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

import httpx

from app.core.config import settings
from app.application.ports.auth import AuthPort
from app.application.ports.booking_store import BookingStorePort
from app.application.use_cases.booking_wizard import BookingWizard
from app.infrastructure.auth.mock_auth import MockAccountDirectory, MockAuth
from app.infrastructure.auth.supabase_auth import SupabaseAuth
from app.infrastructure.notifications.memory_notifier import MemoryNotifier
from app.infrastructure.store.memory_store import MemoryBookingStore
from app.infrastructure.store.seed_data import DEMO_PROFESSIONALS, DEMO_SERVICES
from app.infrastructure.store.supabase_store import SupabaseBookingStore
from app.infrastructure.store.wizard_sessions import MemoryWizardSessionStore


def use_memory_backend() -> bool:
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        return True
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


@lru_cache
def get_memory_store() -> MemoryBookingStore:
    return MemoryBookingStore(professionals=DEMO_PROFESSIONALS, services=DEMO_SERVICES)


@lru_cache
def get_mock_accounts() -> MockAccountDirectory:
    return MockAccountDirectory()


@lru_cache
def get_wizard_sessions() -> MemoryWizardSessionStore:
    return MemoryWizardSessionStore(limit=settings.SESSION_LIMIT)


def get_auth() -> AuthPort:
    """One auth client per wizard: the session it holds belongs to a single user."""
    if use_memory_backend():
        return MockAuth(directory=get_mock_accounts())
    return SupabaseAuth(client=get_http_client())


def get_booking_store(auth: AuthPort) -> BookingStorePort:
    if use_memory_backend():
        return get_memory_store()
    token_provider = auth.fresh_access_token if isinstance(auth, SupabaseAuth) else None
    return SupabaseBookingStore(access_token=token_provider, client=get_http_client())


def business_today() -> date:
    return datetime.now(ZoneInfo(settings.BUSINESS_TIMEZONE)).date()


async def create_wizard(session_id: str) -> BookingWizard:
    logger = logging.getLogger(__name__)
    auth = get_auth()
    wizard = BookingWizard(
        store=get_booking_store(auth),
        auth=auth,
        notifier=MemoryNotifier(),
        today=business_today,
        session_id=session_id,
    )
    await wizard.initialize()
    get_wizard_sessions().put(session_id, wizard)
    logger.info(
        "Wizard session created",
        extra={"session_id": session_id, "step": wizard.step.value, "reason": "memory" if use_memory_backend() else "supabase"},
    )
    return wizard
