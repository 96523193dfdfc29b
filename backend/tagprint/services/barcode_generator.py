# backend/tagprint/services/barcode_generator.py
"""
Генератор растровых штрихкодов EAN-13 и Code128.

Создаёт PNG штрихкодов для ценников. Ошибки генерации не пробрасываются:
результат явно говорит, получилось изображение или нужен текстовый fallback.
"""

import logging
from dataclasses import dataclass
from io import BytesIO

from barcode import EAN13, Code128
from barcode.writer import ImageWriter
from PIL import Image

from tagprint.config import PRINT
from tagprint.models.price_tags import BarcodeRenderSpec, BarcodeSymbology

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RasterReady:
    """Изображение готово."""

    png: bytes
    width_pixels: int
    height_pixels: int


@dataclass(frozen=True)
class RasterDegraded:
    """Изображение не получилось — печатаем текст вместо него."""

    reason: str


RasterResult = RasterReady | RasterDegraded


class BarcodeGenerator:
    """
    Генератор PNG штрихкодов через python-barcode.

    Подпись под штрихкодом не рисуется — её выводит рендер ценника.
    """

    def __init__(
        self,
        dpi: int = PRINT.DPI,
        module_height_mm: float = 10.0,
    ):
        """
        Инициализация генератора.

        Args:
            dpi: Разрешение (по умолчанию 203 DPI для термопринтеров)
            module_height_mm: Высота баров в мм (растр потом масштабируется в блок)
        """
        self.dpi = dpi
        self.module_height_mm = module_height_mm

    def generate(self, spec: BarcodeRenderSpec) -> RasterResult:
        """
        Генерирует PNG штрихкода.

        Args:
            spec: Символика и значение

        Returns:
            RasterReady с PNG или RasterDegraded с причиной
        """
        try:
            png = self._render_png(spec)
            with Image.open(BytesIO(png)) as img:
                width, height = img.size
        except Exception as e:
            logger.warning(
                f"Штрихкод не сгенерирован: {e}",
                extra={"symbology": spec.symbology.value, "barcode": spec.text},
            )
            return RasterDegraded(reason=str(e) or type(e).__name__)

        return RasterReady(png=png, width_pixels=width, height_pixels=height)

    def _render_png(self, spec: BarcodeRenderSpec) -> bytes:
        writer = ImageWriter()
        options = {
            "module_width": 0.33,  # Ширина модуля (бара) в мм
            "module_height": self.module_height_mm,
            "quiet_zone": 1.0,  # Основная зона покоя задаётся в layout
            "write_text": False,
            "dpi": self.dpi,
        }

        if spec.symbology == BarcodeSymbology.EAN13:
            # Контрольную цифру python-barcode считает сам
            barcode = EAN13(spec.text[:12], writer=writer)
        else:
            barcode = Code128(spec.text, writer=writer)

        buffer = BytesIO()
        barcode.write(buffer, options=options)
        return buffer.getvalue()


class BarcodeRasterCache:
    """
    Кэш растров в пределах одного вызова рендера.

    Ключ — "{символика}:{значение}". Хранит и неудачи, чтобы не повторять
    заведомо падающую генерацию для одинаковых ценников в пачке.
    """

    def __init__(self, generator: BarcodeGenerator):
        self.generator = generator
        self._entries: dict[str, RasterResult] = {}

    def get(self, spec: BarcodeRenderSpec) -> RasterResult:
        key = spec.cache_key
        result = self._entries.get(key)
        if result is None:
            result = self.generator.generate(spec)
            self._entries[key] = result
        return result

    def __len__(self) -> int:
        return len(self._entries)
