from abc import ABC, abstractmethod

from app.domain.entities.notice import Notice


class NotifierPort(ABC):
    @abstractmethod
    def notify(self, notice: Notice) -> None:
        raise NotImplementedError

    @abstractmethod
    def drain(self) -> list[Notice]:
        """Return pending notices and forget them."""
        raise NotImplementedError
