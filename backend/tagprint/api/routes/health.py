"""
Health check эндпоинты.

Проверка состояния сервиса и шрифта для печати.
"""

from fastapi import APIRouter

from tagprint.services.fonts import FALLBACK_FONT_NAME, ensure_font_registered

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Базовая проверка состояния сервиса.

    Returns:
        Статус "ok" если сервис работает
    """
    return {"status": "ok"}


@router.get("/health/fonts")
async def health_fonts() -> dict[str, str | bool]:
    """
    Проверка шрифта с кириллицей.

    Returns:
        Имя шрифта и признак поддержки кириллицы
    """
    font_name = ensure_font_registered()
    return {"status": "ok", "font": font_name, "cyrillic": font_name != FALLBACK_FONT_NAME}
