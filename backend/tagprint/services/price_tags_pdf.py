# backend/tagprint/services/price_tags_pdf.py
"""
Генератор PDF ценников через ReportLab.

Поддерживает шаблоны:
- 3x8, 2x5: сетка ценников на листе A4 с тонкой рамкой вокруг ячейки
- xp365b-roll-58x40: один ценник на страницу размером с этикетку рулона

Блоки каждого ценника (сверху вниз): название, цена, артикул (+ магазин),
штрихкод, значение штрихкода. Геометрия считается один раз на вызов.
"""

import logging
import math
from io import BytesIO

from reportlab.lib.colors import Color, HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from tagprint.config import PRINT, get_settings
from tagprint.models.price_tags import (
    LayoutBlock,
    PriceTagLabel,
    PriceTagLayout,
    PriceTagTemplate,
    RollCalibration,
)
from tagprint.services.barcode_generator import (
    BarcodeGenerator,
    BarcodeRasterCache,
    RasterReady,
)
from tagprint.services.barcodes import resolve_barcode_render_spec
from tagprint.services.fonts import ascent, ensure_font_registered, fits_width
from tagprint.services.formatting import format_currency
from tagprint.services.price_tags_layout import build_price_tag_layout
from tagprint.services.text_fit import clamp_text_lines, truncate_line

logger = logging.getLogger(__name__)

CELL_BORDER_COLOR = HexColor("#EEEEEE")
NAME_COLOR = HexColor("#111111")
PRICE_COLOR = HexColor("#000000")
META_COLOR = HexColor("#444444")
FALLBACK_COLOR = HexColor("#666666")

MIN_BARCODE_IMAGE_WIDTH = 30.0
MIN_BARCODE_IMAGE_HEIGHT = 12.0
MIN_NO_PRICE_FONT = 9.0


class PriceTagsPdfGenerator:
    """Генератор PDF ценников (ReportLab)."""

    def __init__(self, barcode_generator: BarcodeGenerator | None = None) -> None:
        self.font_name = ensure_font_registered()
        self.barcode_generator = barcode_generator or BarcodeGenerator()

    def generate(
        self,
        labels: list[PriceTagLabel],
        template: PriceTagTemplate | str,
        locale: str,
        store_name: str | None,
        no_price_label: str,
        no_barcode_label: str,
        sku_label: str,
        roll_calibration: RollCalibration | None = None,
    ) -> bytes:
        """
        Генерирует PDF с ценниками.

        Args:
            labels: Ценники в порядке печати
            template: Шаблон (3x8, 2x5, xp365b-roll-58x40)
            locale: Локаль для форматирования цены (ru-RU, ky-KG, en-US)
            store_name: Название магазина (печатается под артикулом в сетке)
            no_price_label: Текст вместо цены
            no_barcode_label: Текст вместо штрихкода
            sku_label: Подпись артикула
            roll_calibration: Калибровка рулона (только для рулонного шаблона)

        Returns:
            bytes: PDF файл

        Raises:
            ValueError: Если список ценников пуст
        """
        if not labels:
            raise ValueError("Нет ценников для печати")

        template = PriceTagTemplate(template)
        calibration = roll_calibration or RollCalibration()
        layout = build_price_tag_layout(
            template,
            store_name=store_name,
            roll_dimensions_mm=calibration.dimensions_mm if template.is_roll else None,
        )
        # Кэш растров живёт только в этом вызове
        barcode_cache = BarcodeRasterCache(self.barcode_generator)

        buffer = BytesIO()
        # invariant=1: без даты создания и случайного ID — одинаковый вход даёт одинаковые байты
        c = canvas.Canvas(
            buffer,
            pagesize=(layout.page_width, layout.page_height),
            invariant=1,
        )
        c.setTitle("Price tags")

        per_page = layout.labels_per_page
        offset_x = offset_y = 0.0
        if template.is_roll:
            offset_x = PRINT.mm_to_points(calibration.x_offset_mm)
            offset_y = PRINT.mm_to_points(calibration.y_offset_mm)

        degraded = 0
        for index, label in enumerate(labels):
            position = index % per_page
            if position == 0 and index > 0:
                c.showPage()

            row, col = divmod(position, layout.cols)
            cell_x = layout.margin + col * layout.label_width + offset_x
            cell_top = layout.margin + row * layout.label_height + offset_y

            if not template.is_roll:
                self._draw_cell_border(c, layout, cell_x, cell_top)

            self._draw_name(c, layout, label, cell_x, cell_top)
            self._draw_price(c, layout, label, cell_x, cell_top, locale, no_price_label)
            self._draw_meta(c, layout, label, cell_x, cell_top, sku_label, store_name)
            if not self._draw_barcode(c, layout, label, cell_x, cell_top, barcode_cache):
                degraded += 1
                self._draw_no_barcode(c, layout, cell_x, cell_top, no_barcode_label)

        c.showPage()
        c.save()

        pages = len(labels) if template.is_roll else math.ceil(len(labels) / per_page)
        logger.info(
            f"Ценники: {len(labels)} шт., шаблон {template.value}",
            extra={
                "template": template.value,
                "labels": len(labels),
                "pages": pages,
                "barcode_rasters": len(barcode_cache),
                "degraded": degraded,
            },
        )
        return buffer.getvalue()

    # === Блоки ценника ===

    def _draw_cell_border(
        self,
        c: canvas.Canvas,
        layout: PriceTagLayout,
        cell_x: float,
        cell_top: float,
    ) -> None:
        """Тонкая рамка-разделитель ячейки сетки."""
        c.setStrokeColor(CELL_BORDER_COLOR)
        c.setLineWidth(1)
        c.rect(
            cell_x,
            layout.page_height - cell_top - layout.label_height,
            layout.label_width,
            layout.label_height,
            stroke=1,
            fill=0,
        )

    def _draw_name(
        self,
        c: canvas.Canvas,
        layout: PriceTagLayout,
        label: PriceTagLabel,
        cell_x: float,
        cell_top: float,
    ) -> None:
        """Название в несколько строк с многоточием."""
        font_size = layout.config.name_font
        lines = clamp_text_lines(
            label.name,
            max_lines=layout.config.name_lines,
            can_fit=fits_width(font_size, layout.content_width),
        )
        for line_index, line in enumerate(lines):
            self._draw_text(
                c,
                layout,
                line,
                block=layout.name,
                cell_x=cell_x,
                top=cell_top + layout.name.y + line_index * layout.config.name_line_height,
                font_size=font_size,
                color=NAME_COLOR,
            )

    def _draw_price(
        self,
        c: canvas.Canvas,
        layout: PriceTagLayout,
        label: PriceTagLabel,
        cell_x: float,
        cell_top: float,
        locale: str,
        no_price_label: str,
    ) -> None:
        """Цена или подпись "нет цены" (шрифтом меньше)."""
        if label.price is not None and math.isfinite(label.price):
            text = format_currency(label.price, locale, get_settings().currency)
            font_size = layout.config.price_font
        else:
            text = no_price_label
            font_size = max(layout.config.price_font - 2, MIN_NO_PRICE_FONT)

        line = truncate_line(text, fits_width(font_size, layout.content_width))
        self._draw_text(
            c,
            layout,
            line,
            block=layout.price,
            cell_x=cell_x,
            top=cell_top + layout.price.y,
            font_size=font_size,
            color=PRICE_COLOR,
        )

    def _draw_meta(
        self,
        c: canvas.Canvas,
        layout: PriceTagLayout,
        label: PriceTagLabel,
        cell_x: float,
        cell_top: float,
        sku_label: str,
        store_name: str | None,
    ) -> None:
        """Артикул и (если есть вторая строка) название магазина."""
        font_size = layout.config.meta_font
        can_fit = fits_width(font_size, layout.content_width)

        meta_lines = [f"{sku_label}: {label.sku}"]
        if store_name and layout.config.meta_lines > 1:
            meta_lines.append(store_name)

        for line_index, text in enumerate(meta_lines):
            self._draw_text(
                c,
                layout,
                truncate_line(text, can_fit),
                block=layout.meta,
                cell_x=cell_x,
                top=cell_top + layout.meta.y + line_index * layout.config.meta_line_height,
                font_size=font_size,
                color=META_COLOR,
            )

    def _draw_barcode(
        self,
        c: canvas.Canvas,
        layout: PriceTagLayout,
        label: PriceTagLabel,
        cell_x: float,
        cell_top: float,
        barcode_cache: BarcodeRasterCache,
    ) -> bool:
        """
        Рисует растр штрихкода и его значение.

        Returns:
            False, если штрихкода нет или растр не получился (нужен fallback)
        """
        spec = resolve_barcode_render_spec(label.barcode)
        if spec is None:
            return False

        raster = barcode_cache.get(spec)
        if not isinstance(raster, RasterReady):
            return False

        quiet = layout.config.quiet_zone
        block = layout.barcode
        image_width = max(MIN_BARCODE_IMAGE_WIDTH, block.width - quiet * 2)
        image_height = max(MIN_BARCODE_IMAGE_HEIGHT, block.height - quiet * 2)
        image_x = cell_x + block.x + (block.width - image_width) / 2
        image_top = cell_top + block.y + quiet

        c.drawImage(
            ImageReader(BytesIO(raster.png)),
            image_x,
            layout.page_height - image_top - image_height,
            width=image_width,
            height=image_height,
        )

        font_size = layout.config.meta_font
        self._draw_text(
            c,
            layout,
            truncate_line(spec.text, fits_width(font_size, layout.content_width)),
            block=layout.barcode_value,
            cell_x=cell_x,
            top=cell_top + layout.barcode_value.y,
            font_size=font_size,
            color=PRICE_COLOR,
            centered=True,
        )
        return True

    def _draw_no_barcode(
        self,
        c: canvas.Canvas,
        layout: PriceTagLayout,
        cell_x: float,
        cell_top: float,
        no_barcode_label: str,
    ) -> None:
        """Текст вместо штрихкода."""
        font_size = layout.config.meta_font
        self._draw_text(
            c,
            layout,
            truncate_line(no_barcode_label, fits_width(font_size, layout.content_width)),
            block=layout.barcode_value,
            cell_x=cell_x,
            top=cell_top + layout.barcode_value.y,
            font_size=font_size,
            color=FALLBACK_COLOR,
            centered=True,
        )

    def _draw_text(
        self,
        c: canvas.Canvas,
        layout: PriceTagLayout,
        text: str,
        block: LayoutBlock,
        cell_x: float,
        top: float,
        font_size: float,
        color: Color,
        centered: bool = False,
    ) -> None:
        """Рисует строку; top — верх строки от верха страницы."""
        c.setFont(self.font_name, font_size)
        c.setFillColor(color)
        baseline = layout.page_height - top - ascent(font_size)
        x = cell_x + block.x

        if centered:
            c.drawCentredString(x + block.width / 2, baseline, text)
        else:
            c.drawString(x, baseline, text)
