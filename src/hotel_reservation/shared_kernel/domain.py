"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_CURRENCY = "INR"


class Money(BaseModel):
    """Денежная сумма с валютой."""

    amount: Decimal = Field(..., ge=0, description="Сумма денег")
    currency: str = Field(
        default=DEFAULT_CURRENCY, max_length=3, description="Код валюты (ISO 4217)"
    )

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            raise TypeError("Можно складывать только объекты Money")
        if self.currency != other.currency:
            raise ValueError("Нельзя складывать разные валюты")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __mul__(self, multiplier: Union[int, Decimal]) -> "Money":
        if isinstance(multiplier, bool) or not isinstance(multiplier, (int, Decimal)):
            raise TypeError("Множитель должен быть целым числом или Decimal")
        if multiplier < 0:
            raise ValueError("Множитель не может быть отрицательным")
        return Money(amount=self.amount * multiplier, currency=self.currency)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


class DateRange(BaseModel):
    """Полуоткрытый диапазон дат [check_in, check_out)."""

    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date

    @field_validator("check_out")
    @classmethod
    def check_out_after_check_in(cls, v: date, info: ValidationInfo) -> date:
        check_in = info.data.get("check_in")
        if check_in is not None and v <= check_in:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return v

    @property
    def nights(self) -> int:
        """Количество ночей в бронировании."""
        return (self.check_out - self.check_in).days

    def overlaps(self, other: "DateRange") -> bool:
        """
        Проверяет пересечение двух полуоткрытых диапазонов.

        День выезда одного бронирования может совпадать с днем заезда
        следующего: такие диапазоны не пересекаются.
        """
        return self.check_in < other.check_out and other.check_in < self.check_out

    def __str__(self) -> str:
        return f"{self.check_in.isoformat()}→{self.check_out.isoformat()}"


# Общие перечисления
class RoomCategory(str, Enum):
    """Категории номеров в отеле."""

    STANDARD = "Standard"
    DELUXE = "Deluxe"
    SUITE = "Suite"

    @classmethod
    def parse(cls, value: Optional[Union[str, "RoomCategory"]]) -> Optional["RoomCategory"]:
        """
        Разбирает категорию без учета регистра.

        Пустое или неизвестное значение означает "любая категория" и дает None.
        """
        if value is None:
            return None
        if isinstance(value, RoomCategory):
            return value
        text = value.strip().lower()
        for category in cls:
            if category.value.lower() == text:
                return category
        return None


class ReservationStatus(str, Enum):
    """Статусы бронирования."""

    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Статусы платежей."""

    PAID = "PAID"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


class PersistenceException(DomainException):
    """Ошибка чтения или записи хранилища. Операция считается неуспешной."""

    pass


# Общие утилиты
def now() -> datetime:
    """Возвращает текущую дату и время."""
    return datetime.now()


def today() -> date:
    """Возвращает текущую дату."""
    return date.today()
