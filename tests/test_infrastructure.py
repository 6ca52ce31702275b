"""
Тесты для инфраструктурного слоя: CSV-файлы, имитация оплаты, логгер.
"""
import logging
import random
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from hotel_reservation.booking.domain import Reservation
from hotel_reservation.booking.infrastructure import (
    RESERVATIONS_HEADER,
    ConsoleLogger,
    CsvReservationRepository,
    CsvRoomCatalog,
    InMemoryRoomCatalog,
    SimulatedPaymentGateway,
)
from hotel_reservation.shared_kernel import Money, PersistenceException, RoomCategory

from .conftest import make_period, make_room

AMOUNT = Money(amount=Decimal("7500"))


class TestCsvRoomCatalog:
    """Тесты каталога номеров в CSV-файле."""

    def test_seeds_default_catalog(self, tmp_path):
        path = tmp_path / "rooms.csv"
        rooms = CsvRoomCatalog(path).load()

        assert path.exists()
        assert path.read_text(encoding="utf-8").splitlines()[0] == "roomId,category,pricePerNight"
        assert [room.id for room in rooms] == [
            "S101", "S102", "S103", "D201", "D202", "D203", "U301", "U302",
        ]
        assert sum(room.category == RoomCategory.STANDARD for room in rooms) == 3
        assert sum(room.category == RoomCategory.DELUXE for room in rooms) == 3
        assert sum(room.category == RoomCategory.SUITE for room in rooms) == 2
        assert rooms[0].price_per_night.amount == Decimal("2500")

    def test_save_and_load(self, tmp_path, rooms):
        catalog = CsvRoomCatalog(tmp_path / "rooms.csv")
        catalog.save(rooms)

        assert catalog.load() == rooms

    def test_reads_legacy_double_prices(self, tmp_path):
        path = tmp_path / "rooms.csv"
        path.write_text("roomId,category,pricePerNight\nS101,Standard,2500.0\n", encoding="utf-8")

        rooms = CsvRoomCatalog(path).load()

        assert rooms == [make_room("S101", RoomCategory.STANDARD, "2500.0")]

    def test_unknown_category_is_error(self, tmp_path):
        path = tmp_path / "rooms.csv"
        path.write_text("roomId,category,pricePerNight\nX1,Penthouse,100\n", encoding="utf-8")

        with pytest.raises(PersistenceException):
            CsvRoomCatalog(path).load()


class TestCsvReservationRepository:
    """Тесты хранилища бронирований в CSV-файле."""

    def test_creates_empty_file_with_header(self, tmp_path):
        path = tmp_path / "bookings.csv"

        assert CsvReservationRepository(path).load() == []
        assert path.read_text(encoding="utf-8") == ",".join(RESERVATIONS_HEADER) + "\n"

    def test_round_trip(self, tmp_path, rooms, confirmed_reservation):
        failed = Reservation.create(
            reservation_id="R100002",
            customer_name="Пётр Петров",
            room=rooms[2],
            period=make_period("2024-02-10", "2024-02-12"),
            paid=False,
            created_at=datetime(2024, 1, 2, 8, 0),
        )
        refunded = Reservation.create(
            reservation_id="R100003",
            customer_name="Анна",
            room=rooms[1],
            period=make_period("2024-02-01", "2024-02-02"),
            paid=True,
        )
        refunded.cancel()
        saved = [confirmed_reservation, failed, refunded]

        repository = CsvReservationRepository(tmp_path / "bookings.csv")
        repository.save(saved)

        assert repository.load() == saved

    def test_save_overwrites_file(self, tmp_path, confirmed_reservation):
        repository = CsvReservationRepository(tmp_path / "bookings.csv")
        repository.save([confirmed_reservation])
        repository.save([])

        assert repository.load() == []

    def test_commas_in_name_are_stripped(self, tmp_path, confirmed_reservation):
        confirmed_reservation.customer_name = "Иванов, Иван\nмл."
        repository = CsvReservationRepository(tmp_path / "bookings.csv")
        repository.save([confirmed_reservation])

        loaded = repository.load()

        assert loaded[0].customer_name == "Иванов  Иван мл."
        assert loaded[0].room_id == confirmed_reservation.room_id

    def test_short_rows_are_skipped(self, tmp_path):
        path = tmp_path / "bookings.csv"
        path.write_text(
            ",".join(RESERVATIONS_HEADER) + "\nR1,only,three\n", encoding="utf-8"
        )
        logger = MagicMock()

        assert CsvReservationRepository(path, logger=logger).load() == []
        logger.warning.assert_called_once()

    def test_malformed_row_is_error(self, tmp_path):
        path = tmp_path / "bookings.csv"
        path.write_text(
            ",".join(RESERVATIONS_HEADER)
            + "\nR1,Анна,S101,Standard,not-a-date,2024-01-02,1,2500,CONFIRMED,PAID,2024-01-01T00:00:00\n",
            encoding="utf-8",
        )

        with pytest.raises(PersistenceException):
            CsvReservationRepository(path).load()

    def test_write_failure_is_persistence_error(self, tmp_path, confirmed_reservation):
        # Путь указывает на каталог, запись в него невозможна
        repository = CsvReservationRepository(tmp_path)

        with pytest.raises(PersistenceException):
            repository.save([confirmed_reservation])

    def test_undecodable_file_is_persistence_error(self, tmp_path):
        path = tmp_path / "bookings.csv"
        path.write_bytes(
            ",".join(RESERVATIONS_HEADER).encode("utf-8")
            + b"\nR1,\xff\xfe,S101,Standard,2024-01-01,2024-01-02,1,2500,CONFIRMED,PAID,2024-01-01T00:00:00\n"
        )

        with pytest.raises(PersistenceException):
            CsvReservationRepository(path).load()

    def test_failed_save_keeps_previous_file(self, tmp_path, rooms, confirmed_reservation):
        path = tmp_path / "bookings.csv"
        second = Reservation.create(
            reservation_id="R100002",
            customer_name="Пётр Петров",
            room=rooms[1],
            period=make_period("2024-02-10", "2024-02-12"),
            paid=True,
            created_at=datetime(2024, 1, 2, 8, 0),
        )
        repository = CsvReservationRepository(path)
        repository.save([confirmed_reservation, second])

        # Непарный суррогат нельзя записать в UTF-8
        unencodable = second.model_copy(
            update={"reservation_id": "R100003", "customer_name": "Анна\udc80"}
        )
        with pytest.raises(PersistenceException):
            repository.save([unencodable, confirmed_reservation, second])

        assert repository.load() == [confirmed_reservation, second]
        assert not (tmp_path / "bookings.csv.tmp").exists()


class TestInMemoryRoomCatalog:
    def test_defaults_to_seed_catalog(self):
        assert len(InMemoryRoomCatalog().load()) == 8


class TestSimulatedPaymentGateway:
    """Тесты имитации оплаты."""

    def test_valid_card_with_forced_success(self):
        gateway = SimulatedPaymentGateway(success_rate=1.0)

        assert gateway.attempt("1234567812345678", "123", AMOUNT) is True

    def test_valid_card_with_forced_decline(self):
        gateway = SimulatedPaymentGateway(success_rate=0.0)

        assert gateway.attempt("1234567812345678", "123", AMOUNT) is False

    @pytest.mark.parametrize(
        "card_number, cvv",
        [
            ("123456781234567", "123"),  # 15 цифр
            ("12345678123456789", "123"),
            ("1234-5678-1234-56", "123"),
            ("1234567812345678", "12"),
            ("1234567812345678", "12a"),
            ("", ""),
        ],
    )
    def test_invalid_card_always_rejected(self, card_number, cvv):
        rng = MagicMock(spec=random.Random)
        gateway = SimulatedPaymentGateway(success_rate=1.0, rng=rng)

        assert gateway.attempt(card_number, cvv, AMOUNT) is False
        rng.random.assert_not_called()

    def test_whitespace_is_stripped(self):
        gateway = SimulatedPaymentGateway(success_rate=1.0)

        assert gateway.attempt(" 1234567812345678 ", " 123 ", AMOUNT) is True

    def test_uses_injected_random_source(self):
        rng = MagicMock(spec=random.Random)
        rng.random.side_effect = [0.05, 0.95]
        gateway = SimulatedPaymentGateway(success_rate=0.9, rng=rng)

        assert gateway.attempt("1234567812345678", "123", AMOUNT) is True
        assert gateway.attempt("1234567812345678", "123", AMOUNT) is False

    def test_success_rate_bounds(self):
        with pytest.raises(ValueError):
            SimulatedPaymentGateway(success_rate=1.5)


class TestConsoleLogger:
    def test_context_rendered_as_json(self, caplog):
        logger = ConsoleLogger("hotel_reservation.test")

        with caplog.at_level(logging.INFO, logger="hotel_reservation.test"):
            logger.info("Бронирование отменено", reservation_id="R100001")

        assert 'Бронирование отменено | {"reservation_id": "R100001"}' in caplog.text
