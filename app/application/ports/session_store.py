from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from app.application.exceptions import UnknownSessionError

if TYPE_CHECKING:
    from app.application.use_cases.booking_wizard import BookingWizard


class WizardSessionStorePort(ABC):
    @abstractmethod
    def put(self, session_id: str, wizard: "BookingWizard") -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> "BookingWizard | None":
        raise NotImplementedError

    @abstractmethod
    def discard(self, session_id: str) -> "BookingWizard | None":
        raise NotImplementedError

    def require(self, session_id: str) -> "BookingWizard":
        wizard = self.get(session_id)
        if wizard is None:
            raise UnknownSessionError(session_id)
        return wizard
