"""
Конфигурация приложения tagprint.

Все настройки в одном месте (SSOT — Single Source of Truth).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PrintSettings:
    """
    Физические константы печати.

    Единицы ReportLab — пункты (1/72 дюйма). Все размеры носителей задаются в мм
    и переводятся в пункты через mm_to_points.
    """

    POINTS_PER_INCH: float = 72.0
    MM_PER_INCH: float = 25.4

    # Лист A4 для сеточных шаблонов (3x8, 2x5)
    A4_WIDTH: float = 595.28
    A4_HEIGHT: float = 841.89

    # Рулонная этикетка XP-365B
    ROLL_WIDTH_MM: float = 58.0
    ROLL_HEIGHT_MM: float = 40.0
    ROLL_GAP_MM: float = 3.5
    ROLL_OFFSET_MM: float = 0.0

    # Допустимые значения калибровки рулона (min, max)
    ROLL_GAP_LIMITS_MM: tuple[float, float] = (0.0, 6.0)
    ROLL_OFFSET_LIMITS_MM: tuple[float, float] = (-3.0, 3.0)
    ROLL_WIDTH_LIMITS_MM: tuple[float, float] = (20.0, 82.0)
    ROLL_HEIGHT_LIMITS_MM: tuple[float, float] = (20.0, 100.0)

    # Термочек 58мм
    RECEIPT_WIDTH_MM: float = 58.0
    RECEIPT_MIN_HEIGHT_MM: float = 62.0
    RECEIPT_HEIGHT_BUFFER_MM: float = 4.0
    RECEIPT_MARGIN_X_MM: float = 2.0
    RECEIPT_MARGIN_Y_MM: float = 3.0
    RECEIPT_QR_MM: float = 16.0

    # Разрешение растров штрихкодов (термопринтеры)
    DPI: int = 203

    # Предел сумм (цена, строки и итоги чека) по модулю
    MAX_AMOUNT: float = 1_000_000_000_000.0

    @classmethod
    def mm_to_points(cls, mm: float) -> float:
        """Конвертация миллиметров в пункты PDF."""
        return mm * cls.POINTS_PER_INCH / cls.MM_PER_INCH

    @classmethod
    def points_to_mm(cls, points: float) -> float:
        """Конвертация пунктов PDF в миллиметры."""
        return points * cls.MM_PER_INCH / cls.POINTS_PER_INCH


class Settings(BaseSettings):
    """
    Настройки приложения из переменных окружения.

    Загружаются из .env файла или переменных окружения.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Приложение ===
    app_name: str = "tagprint API"
    app_version: str = "0.1.0"
    debug: bool = False

    # === CORS ===
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # === Печать ===
    # Явный путь к TTF шрифту с кириллицей (иначе ищем системные)
    font_path: str | None = None
    currency: str = "KGS"

    # === Лимиты ===
    max_labels_per_request: int = 500  # Всего ценников в одном PDF
    max_quantity_per_item: int = 100  # Копий одного товара

    # === Логирование ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> Settings:
    """
    Получить настройки приложения (singleton).

    Использует кэширование для избежания повторного чтения .env
    """
    return Settings()


# Экспорт констант печати для удобства
PRINT = PrintSettings()
