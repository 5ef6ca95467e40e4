from __future__ import annotations

import logging

from app.application.ports.notifier import NotifierPort
from app.domain.entities.notice import Notice


class MemoryNotifier(NotifierPort):
    """Queues notices until the view layer drains them as toasts."""

    def __init__(self, limit: int = 20) -> None:
        self._pending: list[Notice] = []
        self._limit = limit
        self._logger = logging.getLogger(__name__)

    def notify(self, notice: Notice) -> None:
        self._pending.append(notice)
        if len(self._pending) > self._limit:
            self._pending = self._pending[-self._limit :]
        self._logger.info("Notice queued", extra={"reason": f"{notice.level}: {notice.title}"})

    def drain(self) -> list[Notice]:
        pending, self._pending = self._pending, []
        return pending
