# backend/tagprint/services/price_tags_layout.py
"""
Раскладка блоков ценника.

Для шаблона считает геометрию страницы и ячейки и размещает сверху вниз
пять блоков: название, цена, мета (артикул / магазин), штрихкод, подпись
штрихкода. Если блоки не помещаются, раскладка ужимается в фиксированном
порядке:

1. название в одну строку вместо двух;
2. (только рулон) промежутки между блоками уменьшаются;
3. штрихкод становится ниже, но не ниже минимума.

Порядок шагов — политика, от которой зависит вид уже напечатанных у
клиентов ценников. Менять его нельзя.
"""

from dataclasses import dataclass
from types import MappingProxyType

from tagprint.config import PRINT
from tagprint.models.price_tags import (
    LayoutBlock,
    LayoutConfig,
    PriceTagLayout,
    PriceTagTemplate,
)

mm_to_points = PRINT.mm_to_points

GAPS_COUNT = 4  # Между пятью блоками
GRID_MIN_BARCODE_HEIGHT = 18.0
ROLL_MIN_BARCODE_HEIGHT_MM = 12.0
ROLL_MAX_EXTRA_GAP_MM = 2.0


@dataclass(frozen=True)
class TemplateConfig:
    """Базовые параметры шаблона (в пунктах)."""

    cols: int
    rows: int
    margin: float
    padding: float
    name_font: float
    name_line_height: float
    name_lines: int
    price_font: float
    price_line_height: float
    meta_font: float
    meta_line_height: float
    barcode_height: float
    barcode_text_height: float
    gap: float
    quiet_zone: float


# Конфигурация шаблонов. Только чтение — раскладка никогда не меняет её.
TEMPLATE_CONFIGS: MappingProxyType[PriceTagTemplate, TemplateConfig] = MappingProxyType(
    {
        PriceTagTemplate.GRID_3x8: TemplateConfig(
            cols=3,
            rows=8,
            margin=20,
            padding=8,
            name_font=8,
            name_line_height=9,
            name_lines=2,
            price_font=11,
            price_line_height=12,
            meta_font=6,
            meta_line_height=7,
            barcode_height=22,
            barcode_text_height=7,
            gap=1,
            quiet_zone=2,
        ),
        PriceTagTemplate.GRID_2x5: TemplateConfig(
            cols=2,
            rows=5,
            margin=20,
            padding=10,
            name_font=10,
            name_line_height=12,
            name_lines=2,
            price_font=14,
            price_line_height=16,
            meta_font=8,
            meta_line_height=9,
            barcode_height=34,
            barcode_text_height=9,
            gap=3,
            quiet_zone=2,
        ),
        PriceTagTemplate.ROLL_58x40: TemplateConfig(
            cols=1,
            rows=1,
            margin=0,
            padding=mm_to_points(5),
            name_font=8,
            name_line_height=9.5,
            name_lines=2,
            price_font=12,
            price_line_height=13,
            meta_font=6.5,
            meta_line_height=7.5,
            barcode_height=mm_to_points(ROLL_MIN_BARCODE_HEIGHT_MM),
            barcode_text_height=7.5,
            gap=2,
            quiet_zone=1.5,
        ),
    }
)


def _required_height(
    config: TemplateConfig,
    name_lines: int,
    meta_lines: int,
    barcode_height: float,
    gap: float,
) -> float:
    """Суммарная высота стека блоков с промежутками."""
    return (
        config.name_line_height * name_lines
        + config.price_line_height
        + config.meta_line_height * meta_lines
        + barcode_height
        + config.quiet_zone * 2
        + config.barcode_text_height
        + gap * GAPS_COUNT
    )


def _page_size(
    template: PriceTagTemplate,
    roll_dimensions_mm: tuple[float, float] | None,
) -> tuple[float, float]:
    if not template.is_roll:
        return PRINT.A4_WIDTH, PRINT.A4_HEIGHT

    width_mm, height_mm = roll_dimensions_mm or (PRINT.ROLL_WIDTH_MM, PRINT.ROLL_HEIGHT_MM)
    return mm_to_points(width_mm), mm_to_points(height_mm)


def build_price_tag_layout(
    template: PriceTagTemplate | str,
    store_name: str | None = None,
    roll_dimensions_mm: tuple[float, float] | None = None,
) -> PriceTagLayout:
    """
    Считает раскладку ценника для шаблона.

    Args:
        template: Шаблон (3x8, 2x5, рулон)
        store_name: Название магазина — в сетке добавляет вторую строку меты
        roll_dimensions_mm: (ширина, высота) рулонной этикетки, для сетки игнорируется

    Returns:
        PriceTagLayout с блоками относительно левого верхнего угла ячейки
    """
    template = PriceTagTemplate(template)
    config = TEMPLATE_CONFIGS[template]
    is_roll = template.is_roll

    page_width, page_height = _page_size(template, roll_dimensions_mm)
    label_width = (page_width - config.margin * 2) / config.cols
    label_height = (page_height - config.margin * 2) / config.rows
    padding = config.padding
    content_width = label_width - padding * 2
    content_height = label_height - padding * 2

    meta_lines = 2 if store_name and not is_roll else 1
    name_lines = config.name_lines
    barcode_height = config.barcode_height
    gap = config.gap

    total = _required_height(config, name_lines, meta_lines, barcode_height, gap)

    # 1. Название в одну строку
    if total > content_height and name_lines > 1:
        name_lines = 1
        total = _required_height(config, name_lines, meta_lines, barcode_height, gap)

    # 2. Рулон: ужимаем промежутки пропорционально переполнению
    if is_roll and total > content_height:
        overflow = total - content_height
        gap = max(0.0, gap - overflow / GAPS_COUNT)
        total = _required_height(config, name_lines, meta_lines, barcode_height, gap)

    # 3. Штрихкод ниже, но не ниже минимума (переполнение лучше нечитаемого кода)
    if total > content_height:
        overflow = total - content_height
        min_barcode = mm_to_points(ROLL_MIN_BARCODE_HEIGHT_MM) if is_roll else GRID_MIN_BARCODE_HEIGHT
        barcode_height = max(min_barcode, barcode_height - overflow)
        total = _required_height(config, name_lines, meta_lines, barcode_height, gap)

    # Рулон: свободное место отдаём промежуткам (до 2мм), остаток — поровну сверху и снизу
    vertical_offset = 0.0
    if is_roll and total < content_height:
        leftover = content_height - total
        extra_gap = min(leftover / GAPS_COUNT, mm_to_points(ROLL_MAX_EXTRA_GAP_MM))
        gap += extra_gap
        total = _required_height(config, name_lines, meta_lines, barcode_height, gap)
        vertical_offset = max(0.0, content_height - total) / 2

    name_height = config.name_line_height * name_lines
    meta_height = config.meta_line_height * meta_lines
    barcode_block_height = barcode_height + config.quiet_zone * 2

    heights = [
        name_height,
        config.price_line_height,
        meta_height,
        barcode_block_height,
        config.barcode_text_height,
    ]
    blocks = []
    cursor = padding + vertical_offset
    for height in heights:
        blocks.append(LayoutBlock(x=padding, y=cursor, width=content_width, height=height))
        cursor += height + gap
    name_block, price_block, meta_block, barcode_block, barcode_value_block = blocks

    return PriceTagLayout(
        template=template,
        page_width=page_width,
        page_height=page_height,
        cols=config.cols,
        rows=config.rows,
        margin=config.margin,
        label_width=label_width,
        label_height=label_height,
        padding=padding,
        content_width=content_width,
        content_height=content_height,
        name=name_block,
        price=price_block,
        meta=meta_block,
        barcode=barcode_block,
        barcode_value=barcode_value_block,
        config=LayoutConfig(
            name_font=config.name_font,
            name_line_height=config.name_line_height,
            name_lines=name_lines,
            price_font=config.price_font,
            price_line_height=config.price_line_height,
            meta_font=config.meta_font,
            meta_line_height=config.meta_line_height,
            meta_lines=meta_lines,
            gap=gap,
            barcode_height=barcode_height,
            barcode_text_height=config.barcode_text_height,
            quiet_zone=config.quiet_zone,
            vertical_offset=vertical_offset,
        ),
    )
