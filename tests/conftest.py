"""
Общие фикстуры для тестов системы бронирования.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List
from unittest.mock import MagicMock

import pytest

from hotel_reservation.booking.domain import (
    BookingService,
    Reservation,
    ReservationIdGenerator,
    ReservationStore,
    Room,
)
from hotel_reservation.booking.infrastructure import (
    InMemoryReservationPersistence,
    default_rooms,
)
from hotel_reservation.booking.interfaces import IPaymentGateway
from hotel_reservation.shared_kernel import DateRange, Money, RoomCategory

TODAY = date(2024, 1, 1)


def make_period(check_in: str, check_out: str) -> DateRange:
    return DateRange(
        check_in=date.fromisoformat(check_in), check_out=date.fromisoformat(check_out)
    )


def make_room(room_id: str, category: RoomCategory, price: str) -> Room:
    return Room(
        id=room_id,
        category=category,
        price_per_night=Money(amount=Decimal(price)),
    )


@pytest.fixture
def rooms() -> List[Room]:
    """Небольшой каталог: два стандартных номера и один люкс."""
    return [
        make_room("S101", RoomCategory.STANDARD, "2500"),
        make_room("S102", RoomCategory.STANDARD, "2400"),
        make_room("U301", RoomCategory.SUITE, "7000"),
    ]


@pytest.fixture
def catalog_rooms() -> List[Room]:
    return default_rooms()


@pytest.fixture
def persistence() -> InMemoryReservationPersistence:
    return InMemoryReservationPersistence()


@pytest.fixture
def store(persistence: InMemoryReservationPersistence) -> ReservationStore:
    return ReservationStore(persistence)


@pytest.fixture
def approving_gateway() -> MagicMock:
    """Платежный шлюз, который всегда одобряет оплату."""
    gateway = MagicMock(spec=IPaymentGateway)
    gateway.attempt.return_value = True
    return gateway


@pytest.fixture
def declining_gateway() -> MagicMock:
    """Платежный шлюз, который всегда отклоняет оплату."""
    gateway = MagicMock(spec=IPaymentGateway)
    gateway.attempt.return_value = False
    return gateway


@pytest.fixture
def booking_service(rooms, store, approving_gateway) -> BookingService:
    return BookingService(
        rooms=rooms,
        store=store,
        payment_gateway=approving_gateway,
        id_generator=ReservationIdGenerator(),
        clock=lambda: datetime(2024, 1, 1, 12, 0, 0),
    )


@pytest.fixture
def confirmed_reservation(rooms) -> Reservation:
    return Reservation.create(
        reservation_id="R100001",
        customer_name="Иван Иванов",
        room=rooms[0],
        period=make_period("2024-01-01", "2024-01-05"),
        paid=True,
        created_at=datetime(2023, 12, 20, 9, 30, 15, 123456),
    )
