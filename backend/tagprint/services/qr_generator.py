"""
Генератор QR кодов для фискального чека.

Создаёт PNG с QR из ссылки ОФД/ГНС:
- Коррекция ошибок M
- Чёрный на белом без градаций серого
- Без зоны покоя (поля задаёт рендер чека)
"""

import logging
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from tagprint.services.barcode_generator import RasterDegraded, RasterReady, RasterResult

logger = logging.getLogger(__name__)


class QrGenerator:
    """Генератор QR через библиотеку qrcode (PIL backend)."""

    def __init__(self, box_size: int = 6, border: int = 0):
        """
        Инициализация генератора.

        Args:
            box_size: Размер модуля в пикселях
            border: Зона покоя в модулях
        """
        self.box_size = box_size
        self.border = border

    def generate(self, payload: str) -> RasterResult:
        """
        Генерация QR из строки.

        Args:
            payload: Содержимое QR (пустая строка — сразу fallback)

        Returns:
            RasterReady с PNG или RasterDegraded с причиной
        """
        text = (payload or "").strip()
        if not text:
            return RasterDegraded(reason="empty payload")

        try:
            qr = qrcode.QRCode(
                box_size=self.box_size,
                border=self.border,
                error_correction=ERROR_CORRECT_M,
            )
            qr.add_data(text)
            qr.make(fit=True)
            img = qr.make_image(fill_color="black", back_color="white").get_image()
            # Чистый чёрно-белый
            img = img.convert("1")

            buffer = BytesIO()
            img.save(buffer, format="PNG")
        except Exception as e:
            logger.warning(f"QR не сгенерирован: {e}", extra={"payload_length": len(text)})
            return RasterDegraded(reason=str(e) or type(e).__name__)

        return RasterReady(
            png=buffer.getvalue(),
            width_pixels=img.width,
            height_pixels=img.height,
        )
