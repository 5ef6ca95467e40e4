from __future__ import annotations

from datetime import date

import pytest

from app.application.use_cases.booking_wizard import BookingWizard
from app.infrastructure.auth.mock_auth import MockAccountDirectory, MockAuth
from app.infrastructure.notifications.memory_notifier import MemoryNotifier
from app.domain.entities.identity import AuthenticatedIdentity
from tests.fakes import ScriptedStore

TODAY = date(2025, 3, 1)  # a Saturday
BOOKING_DATE = date(2025, 3, 10)  # a Monday


@pytest.fixture
def store() -> ScriptedStore:
    return ScriptedStore()


@pytest.fixture
def accounts() -> MockAccountDirectory:
    return MockAccountDirectory()


@pytest.fixture
def auth(accounts: MockAccountDirectory) -> MockAuth:
    return MockAuth(directory=accounts)


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def identity() -> AuthenticatedIdentity:
    return AuthenticatedIdentity(user_id="user-1", name="Ada", email="ada@example.com", phone="+5511999999999")


@pytest.fixture
def make_wizard(store, auth, notifier):
    """Factory: `await make_wizard()` returns an initialized wizard on the shared fakes."""

    async def _make(**overrides) -> BookingWizard:
        wizard = BookingWizard(
            store=overrides.get("store", store),
            auth=overrides.get("auth", auth),
            notifier=overrides.get("notifier", notifier),
            today=lambda: TODAY,
            session_id="test",
        )
        return await wizard.initialize()

    return _make


@pytest.fixture
def signed_in_wizard(make_wizard, auth):
    """Factory: wizard that went welcome -> login -> sign-up and now sits on professionals."""

    async def _make(**overrides) -> BookingWizard:
        wizard = await make_wizard(**overrides)
        await wizard.start()
        await wizard.sign_up("Ada Lovelace", "ada@example.com", "+5511999999999", "secret123")
        return wizard

    return _make
