"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Protocol, Sequence

from ..shared_kernel import Money

if TYPE_CHECKING:
    from .domain import Reservation, Room


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IRoomCatalog(Protocol):
    """Интерфейс каталога номеров."""

    def load(self) -> List[Room]: ...
    def save(self, rooms: Sequence[Room]) -> None: ...


class IReservationPersistence(Protocol):
    """
    Интерфейс долговременного хранилища бронирований.

    Сохранение всегда перезаписывает хранилище целиком.
    """

    def load(self) -> List[Reservation]: ...
    def save(self, reservations: Sequence[Reservation]) -> None: ...


class IPaymentGateway(Protocol):
    """Интерфейс для взаимодействия с платежным шлюзом."""

    def attempt(self, card_number: str, cvv: str, amount: Money) -> bool: ...
