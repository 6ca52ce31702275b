"""
Доменная модель контекста бронирования.

Содержит основные сущности, хранилище бронирований и доменные сервисы:
проверку доступности номеров, оформление и отмену бронирований.
"""

import random
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..shared_kernel import (
    BusinessRuleValidationException,
    DateRange,
    DomainException,
    Money,
    PaymentStatus,
    ReservationStatus,
    RoomCategory,
    now,
)
from .interfaces import IPaymentGateway, IReservationPersistence


class Room(BaseModel):
    """Номер в отеле. Не меняется после загрузки каталога."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)  # Например, "S101", "D202"
    category: RoomCategory
    price_per_night: Money


class PaymentDetails(BaseModel):
    """Платежные данные, введенные гостем."""

    model_config = ConfigDict(frozen=True)

    card_number: str
    cvv: str


class Reservation(BaseModel):
    """Бронирование номера в отеле."""

    reservation_id: str
    customer_name: str
    room_id: str
    category: RoomCategory  # Копия категории номера на момент бронирования
    period: DateRange
    nights: int = Field(..., ge=1)
    total_cost: Money
    status: ReservationStatus
    payment_status: PaymentStatus
    created_at: datetime = Field(default_factory=now)

    @model_validator(mode="after")
    def nights_match_period(self) -> "Reservation":
        if self.nights != self.period.nights:
            raise ValueError(
                f"Количество ночей {self.nights} не совпадает с периодом {self.period}"
            )
        return self

    @property
    def check_in(self) -> date:
        return self.period.check_in

    @property
    def check_out(self) -> date:
        return self.period.check_out

    @property
    def is_confirmed(self) -> bool:
        return self.status == ReservationStatus.CONFIRMED

    @property
    def is_cancelled(self) -> bool:
        return self.status == ReservationStatus.CANCELLED

    def cancel(self) -> None:
        """
        Отменяет бронирование.

        Оплаченное бронирование переходит в статус возврата,
        неуспешный платеж остается неуспешным.
        """
        if self.is_cancelled:
            raise BusinessRuleValidationException(
                f"Бронирование {self.reservation_id} уже отменено"
            )

        self.status = ReservationStatus.CANCELLED
        if self.payment_status == PaymentStatus.PAID:
            self.payment_status = PaymentStatus.REFUNDED

    @classmethod
    def create(
        cls,
        reservation_id: str,
        customer_name: str,
        room: Room,
        period: DateRange,
        paid: bool,
        created_at: Optional[datetime] = None,
    ) -> "Reservation":
        """Создает бронирование по результату оплаты."""
        return cls(
            reservation_id=reservation_id,
            customer_name=customer_name,
            room_id=room.id,
            category=room.category,
            period=period,
            nights=period.nights,
            total_cost=room.price_per_night * period.nights,
            status=ReservationStatus.CONFIRMED if paid else ReservationStatus.CANCELLED,
            payment_status=PaymentStatus.PAID if paid else PaymentStatus.FAILED,
            created_at=created_at or now(),
        )


class BookingPolicy:
    """Политики и бизнес-правила для бронирований."""

    @classmethod
    def validate_booking_period(cls, period: DateRange, today: date) -> None:
        """Проверяет, что период бронирования соответствует политикам."""
        if period.nights < 1:
            raise BusinessRuleValidationException(
                "Минимальный срок бронирования - 1 ночь"
            )

        if period.check_in < today:
            raise BusinessRuleValidationException(
                "Дата заезда не может быть в прошлом"
            )


class ReservationStore:
    """
    Хранилище бронирований в памяти.

    Единственный владелец списка бронирований. После каждого изменения
    весь список передается в долговременное хранилище.
    """

    def __init__(self, persistence: IReservationPersistence):
        self._persistence = persistence
        self._reservations: List[Reservation] = list(persistence.load())

    def add(self, reservation: Reservation) -> None:
        if self.contains_id(reservation.reservation_id):
            raise DomainException(
                f"Бронирование {reservation.reservation_id} уже существует"
            )
        self._reservations.append(reservation)
        self.save()

    def save(self) -> None:
        self._persistence.save(list(self._reservations))

    def find(self, reservation_id: str) -> Optional[Reservation]:
        wanted = reservation_id.lower()
        for reservation in self._reservations:
            if reservation.reservation_id.lower() == wanted:
                return reservation
        return None

    def contains_id(self, reservation_id: str) -> bool:
        return self.find(reservation_id) is not None

    def list_all(self) -> List[Reservation]:
        """Возвращает копии бронирований в порядке добавления."""
        return [reservation.model_copy(deep=True) for reservation in self._reservations]

    def confirmed_for_room(self, room_id: str) -> List[Reservation]:
        return [
            reservation
            for reservation in self._reservations
            if reservation.room_id == room_id and reservation.is_confirmed
        ]

    def __len__(self) -> int:
        return len(self._reservations)


class ReservationIdGenerator:
    """Генератор идентификаторов вида R123456."""

    PREFIX = "R"
    MAX_ATTEMPTS = 1000

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def generate(self, store: ReservationStore) -> str:
        for _ in range(self.MAX_ATTEMPTS):
            candidate = f"{self.PREFIX}{self._rng.randint(100000, 999999)}"
            if not store.contains_id(candidate):
                return candidate
        raise DomainException("Не удалось сгенерировать уникальный номер бронирования")


class BookingService:
    """Доменный сервис для поиска, оформления и отмены бронирований."""

    def __init__(
        self,
        rooms: Sequence[Room],
        store: ReservationStore,
        payment_gateway: IPaymentGateway,
        id_generator: Optional[ReservationIdGenerator] = None,
        clock: Callable[[], datetime] = now,
    ):
        self._rooms = list(rooms)
        self._store = store
        self._payment_gateway = payment_gateway
        self._id_generator = id_generator or ReservationIdGenerator()
        self._clock = clock

    @property
    def rooms(self) -> List[Room]:
        return list(self._rooms)

    def is_room_available(self, room_id: str, period: DateRange) -> bool:
        """Проверяет, свободен ли номер на указанные даты."""
        # Отмененные бронирования номер не блокируют
        return not any(
            reservation.period.overlaps(period)
            for reservation in self._store.confirmed_for_room(room_id)
        )

    def search(
        self, category: Optional[Union[str, RoomCategory]], period: DateRange
    ) -> List[Room]:
        """Возвращает свободные номера в порядке каталога."""
        wanted = RoomCategory.parse(category)
        return [
            room
            for room in self._rooms
            if (wanted is None or room.category == wanted)
            and self.is_room_available(room.id, period)
        ]

    def book(
        self,
        customer_name: str,
        category: Optional[Union[str, RoomCategory]],
        period: DateRange,
        payment: PaymentDetails,
    ) -> Optional[Reservation]:
        """
        Оформляет бронирование.

        Возвращает None, если свободных номеров нет. Неуспешная оплата
        тоже сохраняется, как отмененное бронирование с платежом FAILED.
        """
        available = self.search(category, period)
        if not available:
            return None

        # Берем первый свободный номер, без ранжирования по цене
        room = available[0]
        total_cost = room.price_per_night * period.nights

        paid = self._payment_gateway.attempt(
            payment.card_number, payment.cvv, total_cost
        )

        reservation = Reservation.create(
            reservation_id=self._id_generator.generate(self._store),
            customer_name=customer_name,
            room=room,
            period=period,
            paid=paid,
            created_at=self._clock(),
        )

        self._store.add(reservation)
        return reservation.model_copy(deep=True)

    def cancel(self, reservation_id: str) -> bool:
        """Отменяет бронирование. Повторная отмена ничего не меняет."""
        reservation = self._store.find(reservation_id)
        if reservation is None or reservation.is_cancelled:
            return False

        reservation.cancel()
        self._store.save()
        return True

    def find(self, reservation_id: str) -> Optional[Reservation]:
        reservation = self._store.find(reservation_id)
        return reservation.model_copy(deep=True) if reservation else None

    def list_all(self) -> List[Reservation]:
        return self._store.list_all()
