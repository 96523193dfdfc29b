# backend/tagprint/services/fonts.py
"""
Регистрация шрифта с кириллицей для ReportLab.

Один шрифт используется и для измерения ширины, и для рисования.
"""

import logging
import os
import threading

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from tagprint.config import get_settings

logger = logging.getLogger(__name__)

FONT_NAME = "TagFont"
FALLBACK_FONT_NAME = "Helvetica"  # Встроенный, без кириллицы

# Кандидаты по порядку: Docker (DejaVu), Linux, Windows
FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "C:/Windows/Fonts/arial.ttf",
    "C:/Windows/Fonts/tahoma.ttf",
]

_lock = threading.Lock()
_resolved_font: str | None = None


def _candidate_paths() -> list[str]:
    explicit = get_settings().font_path
    return ([explicit] if explicit else []) + FONT_CANDIDATES


def ensure_font_registered() -> str:
    """
    Регистрирует шрифт один раз на процесс.

    Returns:
        Имя шрифта для canvas.setFont / stringWidth
    """
    global _resolved_font
    if _resolved_font is not None:
        return _resolved_font

    with _lock:
        if _resolved_font is not None:
            return _resolved_font

        for font_path in _candidate_paths():
            if not os.path.exists(font_path):
                continue
            try:
                pdfmetrics.registerFont(TTFont(FONT_NAME, font_path))
            except (TTFError, OSError) as e:
                logger.warning(f"Не удалось загрузить шрифт {font_path}: {e}")
                continue
            logger.info(f"Шрифт зарегистрирован: {font_path}")
            _resolved_font = FONT_NAME
            return _resolved_font

        # Если ничего не нашли, используем Helvetica (без кириллицы)
        logger.warning("TTF шрифт с кириллицей не найден, используется Helvetica")
        _resolved_font = FALLBACK_FONT_NAME
        return _resolved_font


def fits_width(font_size: float, max_width: float):
    """Предикат для text_fit: помещается ли строка в max_width."""
    font_name = ensure_font_registered()

    def can_fit(text: str) -> bool:
        return pdfmetrics.stringWidth(text, font_name, font_size) <= max_width

    return can_fit


def ascent(font_size: float) -> float:
    """Расстояние от верхней границы строки до базовой линии."""
    asc, _desc = pdfmetrics.getAscentDescent(ensure_font_registered(), font_size)
    return asc
