"""
Система бронирования номеров в отеле.

Поиск свободных номеров, бронирование с имитацией оплаты, отмена
и просмотр бронирований. Данные хранятся в CSV-файлах.
"""

__version__ = "0.1.0"
