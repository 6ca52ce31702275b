"""
Инфраструктурный слой контекста бронирования.

Содержит реализации портов, зависимые от конкретных технологий:
файлы CSV, генератор случайных чисел, стандартный модуль logging.
"""
import csv
import json
import logging
import os
import random
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..shared_kernel import (
    DEFAULT_CURRENCY,
    DateRange,
    Money,
    PaymentStatus,
    PersistenceException,
    ReservationStatus,
    RoomCategory,
)
from . import interfaces as ports
from .domain import Reservation, Room

ROOMS_HEADER = ["roomId", "category", "pricePerNight"]
RESERVATIONS_HEADER = [
    "reservationId",
    "customerName",
    "roomId",
    "category",
    "checkIn",
    "checkOut",
    "nights",
    "totalCost",
    "status",
    "paymentStatus",
    "createdAt",
]


def default_rooms(currency: str = DEFAULT_CURRENCY) -> List[Room]:
    """Каталог по умолчанию: 3 стандартных, 3 делюкс и 2 люкса."""
    seed = [
        ("S101", RoomCategory.STANDARD, "2500"),
        ("S102", RoomCategory.STANDARD, "2500"),
        ("S103", RoomCategory.STANDARD, "2400"),
        ("D201", RoomCategory.DELUXE, "4000"),
        ("D202", RoomCategory.DELUXE, "4200"),
        ("D203", RoomCategory.DELUXE, "4100"),
        ("U301", RoomCategory.SUITE, "7000"),
        ("U302", RoomCategory.SUITE, "7200"),
    ]
    return [
        Room(
            id=room_id,
            category=category,
            price_per_night=Money(amount=Decimal(price), currency=currency),
        )
        for room_id, category, price in seed
    ]


def _clean_text(value: str) -> str:
    """Убирает разделители из свободного текста: формат не поддерживает экранирование."""
    return re.sub(r"[,\r\n]", " ", value)


class CsvFileRepository:
    """Базовый класс для хранилищ, работающих с CSV-файлами."""

    header: List[str] = []

    def __init__(self, file_path: Union[str, Path], currency: str = DEFAULT_CURRENCY):
        """
        Инициализирует хранилище.

        Args:
            file_path: Путь к CSV-файлу с данными
            currency: Валюта сумм, записанных в файле
        """
        self._file_path = Path(file_path)
        self._currency = currency

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _read_rows(self) -> List[List[str]]:
        """Читает строки файла без заголовка."""
        try:
            with open(self._file_path, "r", encoding="utf-8", newline="") as f:
                rows = list(csv.reader(f))
        except (OSError, UnicodeError, csv.Error) as e:
            raise PersistenceException(
                f"Не удалось прочитать {self._file_path}: {e}"
            ) from e
        return rows[1:]

    def _write_rows(self, rows: List[List[str]]) -> None:
        """
        Перезаписывает файл целиком.

        Данные пишутся во временный файл рядом с целевым и подменяют его
        только после успешной записи: при ошибке прежний файл не меняется.
        """
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            # Создаем директорию, если она не существует
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8", newline="") as f:
                writer = csv.writer(f, lineterminator="\n")
                writer.writerow(self.header)
                writer.writerows(rows)
            os.replace(tmp_path, self._file_path)
        except (OSError, UnicodeError, csv.Error) as e:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceException(
                f"Не удалось записать {self._file_path}: {e}"
            ) from e

    def _money(self, raw: str) -> Money:
        return Money(amount=Decimal(raw), currency=self._currency)


class CsvRoomCatalog(CsvFileRepository, ports.IRoomCatalog):
    """Каталог номеров в файле rooms.csv."""

    header = ROOMS_HEADER

    def load(self) -> List[Room]:
        if not self._file_path.exists():
            self.save(default_rooms(self._currency))

        rooms = []
        for row in self._read_rows():
            if len(row) < len(self.header):
                continue
            try:
                category = RoomCategory.parse(row[1])
                if category is None:
                    raise ValueError(f"Неизвестная категория {row[1]!r}")
                rooms.append(
                    Room(id=row[0], category=category, price_per_night=self._money(row[2]))
                )
            except (ValueError, InvalidOperation) as e:
                raise PersistenceException(
                    f"Некорректная строка каталога {row!r}: {e}"
                ) from e
        return rooms

    def save(self, rooms: Sequence[Room]) -> None:
        self._write_rows(
            [
                [room.id, room.category.value, str(room.price_per_night.amount)]
                for room in rooms
            ]
        )


class CsvReservationRepository(CsvFileRepository, ports.IReservationPersistence):
    """Хранилище бронирований в файле bookings.csv."""

    header = RESERVATIONS_HEADER

    def __init__(
        self,
        file_path: Union[str, Path],
        currency: str = DEFAULT_CURRENCY,
        logger: Optional[ports.ILogger] = None,
    ):
        super().__init__(file_path, currency)
        self._logger = logger or ConsoleLogger(__name__)

    def load(self) -> List[Reservation]:
        if not self._file_path.exists():
            # Пустое хранилище с заголовком
            self._write_rows([])
            return []

        reservations = []
        for row in self._read_rows():
            if len(row) < len(self.header):
                self._logger.warning(
                    "Пропущена неполная строка бронирования", row=row
                )
                continue
            reservations.append(self._parse_row(row))
        return reservations

    def save(self, reservations: Sequence[Reservation]) -> None:
        self._write_rows([self._format_row(reservation) for reservation in reservations])

    def _parse_row(self, row: List[str]) -> Reservation:
        try:
            return Reservation(
                reservation_id=row[0],
                customer_name=row[1],
                room_id=row[2],
                category=RoomCategory(row[3]),
                period=DateRange(
                    check_in=date.fromisoformat(row[4]),
                    check_out=date.fromisoformat(row[5]),
                ),
                nights=int(row[6]),
                total_cost=self._money(row[7]),
                status=ReservationStatus(row[8]),
                payment_status=PaymentStatus(row[9]),
                created_at=datetime.fromisoformat(row[10]),
            )
        except (ValueError, InvalidOperation) as e:
            raise PersistenceException(
                f"Некорректная строка бронирования {row[0]!r}: {e}"
            ) from e

    @staticmethod
    def _format_row(reservation: Reservation) -> List[str]:
        return [
            reservation.reservation_id,
            _clean_text(reservation.customer_name),
            reservation.room_id,
            reservation.category.value,
            reservation.check_in.isoformat(),
            reservation.check_out.isoformat(),
            str(reservation.nights),
            str(reservation.total_cost.amount),
            reservation.status.value,
            reservation.payment_status.value,
            reservation.created_at.isoformat(),
        ]


class InMemoryRoomCatalog(ports.IRoomCatalog):
    """Реализация каталога номеров в памяти."""

    def __init__(self, rooms: Optional[Sequence[Room]] = None):
        self._rooms: List[Room] = list(rooms) if rooms is not None else default_rooms()

    def load(self) -> List[Room]:
        return list(self._rooms)

    def save(self, rooms: Sequence[Room]) -> None:
        self._rooms = list(rooms)


class InMemoryReservationPersistence(ports.IReservationPersistence):
    """Реализация хранилища бронирований в памяти."""

    def __init__(self, reservations: Optional[Sequence[Reservation]] = None):
        self._reservations: List[Reservation] = [
            reservation.model_copy(deep=True) for reservation in reservations or []
        ]
        self.save_count = 0

    def load(self) -> List[Reservation]:
        return [reservation.model_copy(deep=True) for reservation in self._reservations]

    def save(self, reservations: Sequence[Reservation]) -> None:
        self._reservations = [
            reservation.model_copy(deep=True) for reservation in reservations
        ]
        self.save_count += 1


class SimulatedPaymentGateway(ports.IPaymentGateway):
    """
    Заглушка платежного шлюза.

    Номер карты должен состоять ровно из 16 цифр, CVV из 3 цифр.
    Корректные данные проходят с вероятностью success_rate.
    """

    CARD_NUMBER_PATTERN = re.compile(r"[0-9]{16}")
    CVV_PATTERN = re.compile(r"[0-9]{3}")

    def __init__(
        self,
        success_rate: float = 0.9,
        rng: Optional[random.Random] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("Вероятность успеха должна быть в диапазоне [0, 1]")
        self.success_rate = success_rate
        self._rng = rng or random.Random()
        self._logger = logger or ConsoleLogger(__name__)

    def attempt(self, card_number: str, cvv: str, amount: Money) -> bool:
        """Обрабатывает платеж. Возвращает True при успешной оплате."""
        card_number = card_number.strip()
        cvv = cvv.strip()

        if not self.CARD_NUMBER_PATTERN.fullmatch(card_number) or not self.CVV_PATTERN.fullmatch(cvv):
            self._logger.info("Платеж отклонен: некорректные данные карты")
            return False

        success = self._rng.random() < self.success_rate
        self._logger.debug(
            "Платеж обработан",
            amount=str(amount),
            status="completed" if success else "failed",
        )
        return success


class ConsoleLogger(ports.ILogger):
    """Логгер поверх стандартного модуля logging. Контекст выводится как JSON."""

    def __init__(self, name: str = "hotel_reservation"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, kwargs: Dict[str, Any]) -> None:
        if kwargs:
            message = f"{message} | {json.dumps(kwargs, default=str, ensure_ascii=False)}"
        self._logger.log(level, message)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)
