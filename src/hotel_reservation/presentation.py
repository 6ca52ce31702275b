"""
Слой представления: консольное меню.

Собирает ввод пользователя, вызывает сервис приложения и выводит результат.
"""

from datetime import date, datetime
from typing import Callable, Optional, Tuple

from pydantic import ValidationError

from .booking.application import (
    BookRoomRequest,
    HotelApplicationService,
    ReservationDTO,
    SearchRoomsRequest,
)
from .shared_kernel import DomainException, PersistenceException, RoomCategory, today

DATE_FORMAT = "%Y-%m-%d"

MENU = """
1) Поиск свободных номеров
2) Забронировать номер
3) Отменить бронирование
4) Детали бронирования
5) Список всех бронирований
0) Выход"""


class ConsoleController:
    """Контроллер консольного меню."""

    def __init__(
        self,
        service: HotelApplicationService,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        clock: Callable[[], date] = today,
    ):
        self._service = service
        self._input = input_func
        self._output = output
        self._clock = clock
        self._handlers = {
            "1": self.handle_search,
            "2": self.handle_book,
            "3": self.handle_cancel,
            "4": self.handle_view,
            "5": self.handle_list,
        }

    def run(self) -> None:
        self._output("==== Система бронирования отеля ====")
        while True:
            self._output(MENU)
            try:
                choice = self._ask("Выберите пункт: ")
            except EOFError:
                break
            if choice == "0":
                break

            handler = self._handlers.get(choice)
            if handler is None:
                self._output("Неизвестный пункт меню.")
                continue

            try:
                handler()
            except EOFError:
                break
            except PersistenceException as e:
                self._output(f"Ошибка хранилища, действие не выполнено: {e}")
            except (DomainException, ValidationError) as e:
                self._output(f"Ошибка: {e}")
            self._output("")
        self._output("До свидания!")

    # Обработчики пунктов меню

    def handle_search(self) -> None:
        category = self.ask_category()
        dates = self.ask_period()
        if dates is None:
            return

        check_in, check_out = dates
        rooms = self._service.search_rooms(
            SearchRoomsRequest(category=category, check_in=check_in, check_out=check_out)
        )
        if not rooms:
            self._output(
                f"Нет свободных номеров ({category or 'любая категория'}) "
                f"с {check_in} по {check_out}"
            )
            return

        self._output("\nСвободные номера:")
        for room in rooms:
            self._output(f"- {room.id} | {room.category} | {room.price_per_night} за ночь")

    def handle_book(self) -> None:
        customer_name = self._ask("Имя гостя: ")
        category = self.ask_category()
        dates = self.ask_period()
        if dates is None:
            return

        check_in, check_out = dates
        # Платежные данные спрашиваем, только если есть что бронировать
        if not self._service.search_rooms(
            SearchRoomsRequest(category=category, check_in=check_in, check_out=check_out)
        ):
            self._output("Нет свободных номеров на выбранные даты.")
            return

        self._output("\n--- Имитация оплаты ---")
        card_number = self._ask("Номер карты (16 цифр): ")
        cvv = self._ask("CVV (3 цифры): ")

        result = self._service.book_room(
            BookRoomRequest(
                customer_name=customer_name,
                category=category,
                check_in=check_in,
                check_out=check_out,
                card_number=card_number,
                cvv=cvv,
            )
        )
        self._output(result.message)
        if result.reservation is not None:
            self.print_reservation(result.reservation)

    def handle_cancel(self) -> None:
        reservation_id = self._ask("Номер бронирования для отмены: ")
        if self._service.cancel_reservation(reservation_id):
            self._output("Бронирование отменено (возврат оплаты, если она была).")
        else:
            self._output("Бронирование не найдено или уже отменено.")

    def handle_view(self) -> None:
        reservation_id = self._ask("Номер бронирования: ")
        reservation = self._service.get_reservation(reservation_id)
        if reservation is None:
            self._output("Бронирование не найдено.")
        else:
            self.print_reservation(reservation)

    def handle_list(self) -> None:
        reservations = self._service.list_reservations()
        if not reservations:
            self._output("Бронирований пока нет.")
            return
        for reservation in reservations:
            self.print_reservation_brief(reservation)

    # Ввод

    def ask_category(self) -> Optional[str]:
        text = self._ask("Категория [Standard/Deluxe/Suite, Enter - любая]: ")
        if not text:
            return None
        category = RoomCategory.parse(text)
        if category is None:
            self._output("Неизвестная категория. Ищем в любой.")
            return None
        return category.value

    def ask_date(self, prompt: str) -> date:
        while True:
            text = self._ask(prompt)
            try:
                return datetime.strptime(text, DATE_FORMAT).date()
            except ValueError:
                self._output("Неверный формат даты. Повторите (ГГГГ-ММ-ДД).")

    def ask_period(self) -> Optional[Tuple[date, date]]:
        check_in = self.ask_date("Дата заезда (ГГГГ-ММ-ДД): ")
        check_out = self.ask_date("Дата выезда (ГГГГ-ММ-ДД): ")
        if check_out <= check_in:
            self._output("Дата выезда должна быть позже даты заезда.")
            return None
        if check_in < self._clock():
            self._output("Дата заезда не может быть в прошлом.")
            return None
        return check_in, check_out

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    # Вывод

    def print_reservation(self, r: ReservationDTO) -> None:
        self._output("\n===== Детали бронирования =====")
        self._output(f"Номер брони : {r.reservation_id}")
        self._output(f"Гость       : {r.customer_name}")
        self._output(f"Номер       : {r.room_id} ({r.category})")
        self._output(f"Заезд       : {r.check_in}")
        self._output(f"Выезд       : {r.check_out}")
        self._output(f"Ночей       : {r.nights}")
        self._output(f"Стоимость   : {r.total_cost}")
        self._output(f"Статус      : {r.status}")
        self._output(f"Оплата      : {r.payment_status}")
        self._output(f"Создано     : {r.created_at}")

    def print_reservation_brief(self, r: ReservationDTO) -> None:
        self._output(
            f"{r.reservation_id} | {r.customer_name} | {r.room_id} | "
            f"{r.check_in}→{r.check_out} | {r.total_cost} | "
            f"{r.status}/{r.payment_status}"
        )
