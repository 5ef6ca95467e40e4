from __future__ import annotations

import threading
from collections import OrderedDict
from typing import TYPE_CHECKING

from app.application.ports.session_store import WizardSessionStorePort

if TYPE_CHECKING:
    from app.application.use_cases.booking_wizard import BookingWizard


class MemoryWizardSessionStore(WizardSessionStorePort):
    """Keeps one wizard per session id; the oldest sessions are evicted past `limit`."""

    def __init__(self, limit: int = 1000) -> None:
        self._wizards: "OrderedDict[str, BookingWizard]" = OrderedDict()
        self._limit = limit
        self._lock = threading.Lock()

    def put(self, session_id: str, wizard: "BookingWizard") -> None:
        with self._lock:
            self._wizards[session_id] = wizard
            self._wizards.move_to_end(session_id)
            while len(self._wizards) > self._limit:
                _, evicted = self._wizards.popitem(last=False)
                evicted.close()

    def get(self, session_id: str) -> "BookingWizard | None":
        with self._lock:
            wizard = self._wizards.get(session_id)
            if wizard is not None:
                self._wizards.move_to_end(session_id)
            return wizard

    def discard(self, session_id: str) -> "BookingWizard | None":
        with self._lock:
            return self._wizards.pop(session_id, None)
