"""
Настройки приложения.

Значения читаются из переменных окружения с префиксом HOTEL_
и из файла .env, если он есть.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .shared_kernel import DEFAULT_CURRENCY


class HotelSettings(BaseSettings):
    """Настройки системы бронирования."""

    model_config = SettingsConfigDict(
        env_prefix="HOTEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default=Path("."), description="Каталог с файлами данных")
    rooms_file: str = "rooms.csv"
    bookings_file: str = "bookings.csv"
    currency: str = Field(default=DEFAULT_CURRENCY, max_length=3)
    payment_success_rate: float = Field(default=0.9, ge=0.0, le=1.0)
    random_seed: Optional[int] = None
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return v

    @property
    def rooms_path(self) -> Path:
        return self.data_dir / self.rooms_file

    @property
    def bookings_path(self) -> Path:
        return self.data_dir / self.bookings_file


@lru_cache()
def get_settings() -> HotelSettings:
    """Возвращает настройки, прочитанные один раз за процесс."""
    return HotelSettings()
