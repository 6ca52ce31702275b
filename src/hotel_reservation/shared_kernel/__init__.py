"""
Общее ядро (Shared Kernel) системы бронирования отеля.

Содержит общие типы данных и утилиты, используемые слоями контекста бронирования.
"""

from .domain import (
    DEFAULT_CURRENCY,
    BusinessRuleValidationException,
    DateRange,
    # Исключения
    DomainException,
    # Основные классы
    Money,
    PaymentStatus,
    PersistenceException,
    ReservationStatus,
    # Перечисления
    RoomCategory,
    # Утилиты
    now,
    today,
)

__all__ = [
    "DEFAULT_CURRENCY",
    # Основные классы
    "Money",
    "DateRange",
    # Перечисления
    "RoomCategory",
    "ReservationStatus",
    "PaymentStatus",
    # Исключения
    "DomainException",
    "BusinessRuleValidationException",
    "PersistenceException",
    # Утилиты
    "now",
    "today",
]
