"""
Прикладной слой контекста бронирования.

Содержит сервисы приложения, которые координируют
взаимодействие между внешними интерфейсами и доменной моделью.
"""

from datetime import date
from typing import Callable, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ..shared_kernel import DateRange, today
from . import interfaces as ports
from .domain import (
    BookingPolicy,
    BookingService,
    PaymentDetails,
    Reservation,
    ReservationIdGenerator,
    ReservationStore,
    Room,
)
from .infrastructure import ConsoleLogger

# DTO (Data Transfer Objects) для входящих данных


class SearchRoomsRequest(BaseModel):
    """Запрос на поиск свободных номеров."""

    category: Optional[str] = None
    check_in: date
    check_out: date

    @field_validator("check_out")
    @classmethod
    def check_out_after_check_in(cls, v: date, info: ValidationInfo) -> date:
        if "check_in" in info.data and v <= info.data["check_in"]:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return v

    @property
    def period(self) -> DateRange:
        return DateRange(check_in=self.check_in, check_out=self.check_out)


class BookRoomRequest(SearchRoomsRequest):
    """Запрос на бронирование номера."""

    customer_name: str = Field(..., min_length=1)
    card_number: str = ""
    cvv: str = ""

    @field_validator("customer_name")
    @classmethod
    def customer_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Имя гостя не может быть пустым")
        return v

    @property
    def payment(self) -> PaymentDetails:
        return PaymentDetails(card_number=self.card_number, cvv=self.cvv)


# DTO для исходящих данных


class RoomDTO(BaseModel):
    """DTO для представления номера."""

    id: str
    category: str
    price_per_night: str

    @classmethod
    def from_domain(cls, room: Room) -> "RoomDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=room.id,
            category=room.category.value,
            price_per_night=str(room.price_per_night),
        )


class ReservationDTO(BaseModel):
    """DTO для представления бронирования."""

    reservation_id: str
    customer_name: str
    room_id: str
    category: str
    check_in: date
    check_out: date
    nights: int
    total_cost: str
    status: str
    payment_status: str
    created_at: str

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationDTO":
        """Создает DTO из доменной модели."""
        return cls(
            reservation_id=reservation.reservation_id,
            customer_name=reservation.customer_name,
            room_id=reservation.room_id,
            category=reservation.category.value,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            nights=reservation.nights,
            total_cost=str(reservation.total_cost),
            status=reservation.status.value,
            payment_status=reservation.payment_status.value,
            created_at=reservation.created_at.isoformat(timespec="seconds"),
        )


class BookingResult(BaseModel):
    """Результат попытки бронирования."""

    success: bool
    reservation: Optional[ReservationDTO] = None
    message: str


# Сервисы приложения


class HotelApplicationService:
    """Сервис приложения для поиска, бронирования и отмены."""

    def __init__(
        self,
        catalog: ports.IRoomCatalog,
        reservations: ports.IReservationPersistence,
        payment_gateway: ports.IPaymentGateway,
        id_generator: Optional[ReservationIdGenerator] = None,
        logger: Optional[ports.ILogger] = None,
        clock: Callable[[], date] = today,
    ):
        """Инициализирует сервис и загружает каталог и бронирования."""
        self._logger = logger or ConsoleLogger(__name__)
        self._clock = clock
        self._store = ReservationStore(reservations)
        self._booking_service = BookingService(
            rooms=catalog.load(),
            store=self._store,
            payment_gateway=payment_gateway,
            id_generator=id_generator,
        )
        self._logger.debug(
            "Сервис бронирования инициализирован",
            rooms=len(self._booking_service.rooms),
            reservations=len(self._store),
        )

    def list_rooms(self) -> List[RoomDTO]:
        """Возвращает весь каталог номеров."""
        return [RoomDTO.from_domain(room) for room in self._booking_service.rooms]

    def search_rooms(self, request: SearchRoomsRequest) -> List[RoomDTO]:
        """Возвращает список свободных номеров."""
        period = request.period
        BookingPolicy.validate_booking_period(period, self._clock())

        rooms = self._booking_service.search(request.category, period)
        self._logger.info(
            "Поиск номеров",
            category=request.category,
            period=str(period),
            found=len(rooms),
        )
        return [RoomDTO.from_domain(room) for room in rooms]

    def book_room(self, request: BookRoomRequest) -> BookingResult:
        """Бронирует первый свободный номер и проводит оплату."""
        period = request.period
        BookingPolicy.validate_booking_period(period, self._clock())

        reservation = self._booking_service.book(
            customer_name=request.customer_name,
            category=request.category,
            period=period,
            payment=request.payment,
        )

        if reservation is None:
            self._logger.info(
                "Нет свободных номеров",
                category=request.category,
                period=str(period),
            )
            return BookingResult(
                success=False,
                message="Нет свободных номеров на выбранные даты",
            )

        dto = ReservationDTO.from_domain(reservation)
        if reservation.is_confirmed:
            self._logger.info(
                "Бронирование подтверждено",
                reservation_id=reservation.reservation_id,
                room_id=reservation.room_id,
            )
            return BookingResult(
                success=True, reservation=dto, message="Бронирование подтверждено"
            )

        self._logger.warning(
            "Оплата не прошла, бронирование отменено",
            reservation_id=reservation.reservation_id,
        )
        return BookingResult(
            success=False,
            reservation=dto,
            message="Оплата не прошла, бронирование отменено",
        )

    def cancel_reservation(self, reservation_id: str) -> bool:
        """Отменяет бронирование. False, если не найдено или уже отменено."""
        cancelled = self._booking_service.cancel(reservation_id)
        if cancelled:
            self._logger.info("Бронирование отменено", reservation_id=reservation_id)
        else:
            self._logger.info(
                "Бронирование не найдено или уже отменено",
                reservation_id=reservation_id,
            )
        return cancelled

    def get_reservation(self, reservation_id: str) -> Optional[ReservationDTO]:
        """Возвращает информацию о бронировании."""
        reservation = self._booking_service.find(reservation_id)
        if reservation is None:
            return None
        return ReservationDTO.from_domain(reservation)

    def list_reservations(self) -> List[ReservationDTO]:
        """Возвращает все бронирования в порядке оформления."""
        return [
            ReservationDTO.from_domain(reservation)
            for reservation in self._booking_service.list_all()
        ]
