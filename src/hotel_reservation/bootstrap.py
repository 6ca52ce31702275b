import logging
import random
from typing import Optional

from .booking.application import HotelApplicationService
from .booking.domain import ReservationIdGenerator
from .booking.infrastructure import (
    ConsoleLogger,
    CsvReservationRepository,
    CsvRoomCatalog,
    SimulatedPaymentGateway,
)
from .config import HotelSettings, get_settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def bootstrap_app(settings: Optional[HotelSettings] = None) -> HotelApplicationService:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    logger = ConsoleLogger("hotel_reservation")

    # 1. Один источник случайности на процесс, чтобы прогон можно было повторить по seed
    rng = random.Random(settings.random_seed)

    # 2. Файловые хранилища
    catalog = CsvRoomCatalog(settings.rooms_path, currency=settings.currency)
    reservations = CsvReservationRepository(
        settings.bookings_path, currency=settings.currency, logger=logger
    )

    # 3. Сервис приложения с внедренными зависимостями
    return HotelApplicationService(
        catalog=catalog,
        reservations=reservations,
        payment_gateway=SimulatedPaymentGateway(
            success_rate=settings.payment_success_rate, rng=rng, logger=logger
        ),
        id_generator=ReservationIdGenerator(rng),
        logger=logger,
    )
