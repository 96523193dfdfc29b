# backend/tagprint/models/price_tags.py
"""
Типы данных для печати ценников.
"""

from dataclasses import dataclass
from enum import Enum

from tagprint.config import PRINT


class PriceTagTemplate(str, Enum):
    """Шаблоны ценников (носители печати)."""

    GRID_3x8 = "3x8"  # A4, 24 ценника на листе
    GRID_2x5 = "2x5"  # A4, 10 ценников на листе
    ROLL_58x40 = "xp365b-roll-58x40"  # Рулон XP-365B, один ценник на страницу

    @property
    def is_roll(self) -> bool:
        """Рулонный шаблон (размер страницы = размер этикетки)."""
        return self is PriceTagTemplate.ROLL_58x40


class BarcodeSymbology(str, Enum):
    """Поддерживаемые символики штрихкодов."""

    EAN13 = "EAN13"
    CODE128 = "CODE128"


@dataclass(frozen=True)
class BarcodeRenderSpec:
    """Что и какой символикой рисовать."""

    symbology: BarcodeSymbology
    text: str

    @property
    def cache_key(self) -> str:
        return f"{self.symbology.value}:{self.text}"


@dataclass
class PriceTagLabel:
    """Данные одного ценника."""

    name: str
    sku: str
    barcode: str
    price: float | None = None


@dataclass(frozen=True)
class RollCalibration:
    """
    Калибровка рулонного принтера.

    gap_mm — зазор между этикетками (отрабатывает датчик принтера),
    x/y_offset_mm — сдвиг печати, width/height_mm — размер этикетки.
    """

    gap_mm: float = PRINT.ROLL_GAP_MM
    x_offset_mm: float = PRINT.ROLL_OFFSET_MM
    y_offset_mm: float = PRINT.ROLL_OFFSET_MM
    width_mm: float = PRINT.ROLL_WIDTH_MM
    height_mm: float = PRINT.ROLL_HEIGHT_MM

    @property
    def dimensions_mm(self) -> tuple[float, float]:
        """Возвращает (ширина, высота) в мм."""
        return self.width_mm, self.height_mm


@dataclass(frozen=True)
class LayoutBlock:
    """Прямоугольник блока внутри ячейки (y сверху вниз, в пунктах)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class LayoutConfig:
    """Итоговый бюджет шрифтов и строк после деградации."""

    name_font: float
    name_line_height: float
    name_lines: int
    price_font: float
    price_line_height: float
    meta_font: float
    meta_line_height: float
    meta_lines: int
    gap: float
    barcode_height: float
    barcode_text_height: float
    quiet_zone: float
    vertical_offset: float = 0.0


@dataclass(frozen=True)
class PriceTagLayout:
    """Геометрия шаблона: страница, ячейка и пять блоков."""

    template: PriceTagTemplate
    page_width: float
    page_height: float
    cols: int
    rows: int
    margin: float
    label_width: float
    label_height: float
    padding: float
    content_width: float
    content_height: float
    name: LayoutBlock
    price: LayoutBlock
    meta: LayoutBlock
    barcode: LayoutBlock
    barcode_value: LayoutBlock
    config: LayoutConfig

    @property
    def labels_per_page(self) -> int:
        return self.cols * self.rows

    @property
    def blocks(self) -> tuple[LayoutBlock, ...]:
        """Блоки сверху вниз."""
        return (self.name, self.price, self.meta, self.barcode, self.barcode_value)

    @property
    def stack_height(self) -> float:
        """Сумма высот блоков и четырёх промежутков между ними."""
        return sum(block.height for block in self.blocks) + self.config.gap * 4

