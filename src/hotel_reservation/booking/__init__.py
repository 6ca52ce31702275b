"""
Модуль контекста бронирования (Booking Context).

Отвечает за бронирование номеров в отеле, включая:
- Поиск свободных номеров по категории и датам
- Оформление бронирования с имитацией оплаты
- Отмену бронирования и возврат оплаты
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
