# backend/tagprint/services/receipt_pdf.py
"""
Генератор PDF чека POS для ленты 58мм.

Высота страницы заранее неизвестна (зависит от переносов строк), поэтому
чек проходится дважды одним и тем же кодом:
1. без canvas — только считаем высоту по метрикам шрифта;
2. с canvas высотой max(62мм, измеренная) — рисуем.
"""

import logging
from io import BytesIO

from reportlab.lib.colors import Color, HexColor
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from tagprint.config import PRINT, get_settings
from tagprint.models.receipt import (
    FiscalModeStatus,
    ReceiptJob,
    ReceiptLabels,
    ReceiptVariant,
)
from tagprint.services.barcode_generator import RasterReady
from tagprint.services.fonts import ascent, ensure_font_registered, fits_width
from tagprint.services.formatting import format_amount, format_currency, format_datetime
from tagprint.services.qr_generator import QrGenerator
from tagprint.services.text_fit import truncate_line

logger = logging.getLogger(__name__)

LINE_SPACING = 1.2  # Межстрочный интервал абзаца относительно кегля

TEXT_COLOR = HexColor("#111111")
ROW_LABEL_COLOR = HexColor("#333333")
META_COLOR = HexColor("#444444")
QTY_COLOR = HexColor("#555555")
SEPARATOR_COLOR = HexColor("#CFCFCF")
PRECHECK_FILL = HexColor("#F3F3F3")
PRECHECK_STROKE = HexColor("#D5D5D5")


class _ReceiptPass:
    """
    Один проход по содержимому чека.

    Курсор y идёт сверху вниз. Без canvas методы только двигают курсор,
    с canvas — ещё и рисуют.
    """

    def __init__(
        self,
        font_name: str,
        page_height: float | None = None,
        c: canvas.Canvas | None = None,
    ):
        self.font_name = font_name
        self.page_height = page_height
        self.c = c

        self.left = PRINT.mm_to_points(PRINT.RECEIPT_MARGIN_X_MM)
        self.right = PRINT.mm_to_points(PRINT.RECEIPT_WIDTH_MM) - self.left
        self.content_width = self.right - self.left
        self.amount_width = max(56.0, self.content_width * 0.44)
        self.y = PRINT.mm_to_points(PRINT.RECEIPT_MARGIN_Y_MM)

    @property
    def drawing(self) -> bool:
        return self.c is not None

    def space(self, height: float) -> None:
        self.y += height

    def wrapped_height(self, text: str, font_size: float, width: float) -> float:
        lines = simpleSplit(text, self.font_name, font_size, width) or [""]
        return len(lines) * font_size * LINE_SPACING

    def paragraph(
        self,
        text: str,
        font_size: float,
        color: Color,
        x: float | None = None,
        width: float | None = None,
        top: float | None = None,
        centered: bool = False,
    ) -> float:
        """Абзац с переносами. Курсор не двигает, возвращает высоту."""
        x = self.left if x is None else x
        width = self.content_width if width is None else width
        top = self.y if top is None else top

        lines = simpleSplit(text, self.font_name, font_size, width) or [""]
        if self.drawing:
            leading = font_size * LINE_SPACING
            self.c.setFont(self.font_name, font_size)
            self.c.setFillColor(color)
            for index, line in enumerate(lines):
                baseline = self._baseline(top + index * leading, font_size)
                if centered:
                    self.c.drawCentredString(x + width / 2, baseline, line)
                else:
                    self.c.drawString(x, baseline, line)
        return len(lines) * font_size * LINE_SPACING

    def line(
        self,
        text: str,
        font_size: float,
        color: Color,
        x: float | None = None,
        width: float | None = None,
        align: str = "left",
    ) -> None:
        """Одна строка без переноса (обрезается многоточием). Курсор не двигает."""
        if not self.drawing:
            return

        x = self.left if x is None else x
        width = self.content_width if width is None else width
        text = truncate_line(text, fits_width(font_size, width))

        self.c.setFont(self.font_name, font_size)
        self.c.setFillColor(color)
        baseline = self._baseline(self.y, font_size)
        if align == "center":
            self.c.drawCentredString(x + width / 2, baseline, text)
        elif align == "right":
            self.c.drawRightString(x + width, baseline, text)
        else:
            self.c.drawString(x, baseline, text)

    def meta_line(self, text: str, font_size: float = 7.5, gap: float = 2) -> None:
        height = self.paragraph(text, font_size, META_COLOR)
        self.y += height + gap

    def separator(self) -> None:
        if self.drawing:
            pdf_y = self.page_height - self.y
            self.c.setStrokeColor(SEPARATOR_COLOR)
            self.c.setLineWidth(0.7)
            self.c.line(self.left, pdf_y, self.right, pdf_y)
        self.y += 4

    def amount_row(self, label: str, value: str, emphasized: bool = False) -> None:
        label_width = self.content_width - self.amount_width - 4
        self.line(
            label,
            9 if emphasized else 8,
            TEXT_COLOR if emphasized else ROW_LABEL_COLOR,
            width=label_width,
        )
        self.line(
            value,
            9.5 if emphasized else 8,
            TEXT_COLOR,
            x=self.right - self.amount_width,
            width=self.amount_width,
            align="right",
        )
        self.y += 13 if emphasized else 12

    def box(self, top: float, height: float) -> None:
        if not self.drawing:
            return
        self.c.setFillColor(PRECHECK_FILL)
        self.c.setStrokeColor(PRECHECK_STROKE)
        self.c.setLineWidth(1)
        self.c.rect(self.left, self.page_height - top - height, self.content_width, height, stroke=1, fill=1)

    def image(self, png: bytes, size: float) -> None:
        if self.drawing:
            x = self.left + (self.content_width - size) / 2
            self.c.drawImage(
                ImageReader(BytesIO(png)),
                x,
                self.page_height - self.y - size,
                width=size,
                height=size,
            )
        self.y += size

    def _baseline(self, top: float, font_size: float) -> float:
        return self.page_height - top - ascent(font_size)


class ReceiptPdfGenerator:
    """Генератор PDF чека (ReportLab)."""

    def __init__(self, qr_generator: QrGenerator | None = None) -> None:
        self.font_name = ensure_font_registered()
        self.qr_generator = qr_generator or QrGenerator()

    def generate(self, job: ReceiptJob, labels: ReceiptLabels | None = None) -> bytes:
        """
        Генерирует PDF чека.

        Args:
            job: Продажа для печати
            labels: Переведённые подписи (по умолчанию русские)

        Returns:
            bytes: PDF файл (одна страница шириной 58мм)
        """
        labels = labels or ReceiptLabels()

        qr_png = None
        qr_payload = (job.fiscal.qr_payload or "").strip()
        if job.variant == ReceiptVariant.FISCAL and qr_payload:
            qr = self.qr_generator.generate(qr_payload)
            if isinstance(qr, RasterReady):
                qr_png = qr.png

        # Проход 1: измерение
        measure = _ReceiptPass(self.font_name)
        self._walk(measure, job, labels, qr_png)
        measured = (
            measure.y
            + PRINT.mm_to_points(PRINT.RECEIPT_MARGIN_Y_MM)
            + PRINT.mm_to_points(PRINT.RECEIPT_HEIGHT_BUFFER_MM)
        )
        page_width = PRINT.mm_to_points(PRINT.RECEIPT_WIDTH_MM)
        page_height = max(PRINT.mm_to_points(PRINT.RECEIPT_MIN_HEIGHT_MM), measured)

        # Проход 2: рисование
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(page_width, page_height), invariant=1)
        c.setTitle(f"Receipt {job.number}")
        self._walk(_ReceiptPass(self.font_name, page_height, c), job, labels, qr_png)
        c.showPage()
        c.save()

        logger.info(
            f"Чек {job.number} ({job.variant.value})",
            extra={
                "sale_number": job.number,
                "variant": job.variant.value,
                "items": len(job.items),
                "height_mm": round(PRINT.points_to_mm(page_height), 1),
                "qr": qr_png is not None,
            },
        )
        return buffer.getvalue()

    def _walk(
        self,
        p: _ReceiptPass,
        job: ReceiptJob,
        labels: ReceiptLabels,
        qr_png: bytes | None,
    ) -> None:
        """Всё содержимое чека сверху вниз."""
        locale = job.locale
        currency = get_settings().currency

        def money(amount: float) -> str:
            return format_currency(amount, locale, currency)

        # === Шапка ===
        p.line(labels.title, 10, TEXT_COLOR, align="center")
        p.space(14)

        business_height = p.paragraph(job.business_name, 8.8, TEXT_COLOR)
        p.space(business_height + 2)

        if (job.inn or "").strip():
            p.meta_line(f"{labels.inn}: {job.inn}")
        if (job.address or "").strip():
            p.meta_line(f"{labels.address}: {job.address}")
        if (job.phone or "").strip():
            p.meta_line(f"{labels.phone}: {job.phone}")

        p.space(2)
        p.meta_line(f"{labels.sale_number}: {job.number}")
        p.meta_line(f"{labels.created_at}: {format_datetime(job.created_at, locale)}")
        if job.register_name:
            p.meta_line(f"{labels.register}: {job.register_name}")
        if job.cashier_name:
            p.meta_line(f"{labels.cashier}: {job.cashier_name}")
        if job.shift_label:
            p.meta_line(f"{labels.shift}: {job.shift_label}")

        # === Плашка предчека ===
        if job.variant == ReceiptVariant.PRECHECK:
            p.space(2)
            inner_width = p.content_width - 6
            title_height = p.wrapped_height(labels.precheck_title, 8.6, inner_width)
            hint_height = p.wrapped_height(labels.precheck_hint, 6.7, inner_width)
            box_top = p.y
            box_height = title_height + hint_height + 8

            p.box(box_top, box_height)
            p.paragraph(
                labels.precheck_title,
                8.6,
                TEXT_COLOR,
                x=p.left + 3,
                width=inner_width,
                top=box_top + 2,
                centered=True,
            )
            p.paragraph(
                labels.precheck_hint,
                6.7,
                META_COLOR,
                x=p.left + 3,
                width=inner_width,
                top=box_top + 4 + title_height,
            )
            p.space(box_height + 2)

        p.space(2)
        p.separator()

        # === Позиции ===
        label_width = p.content_width - p.amount_width - 4
        for item in job.items:
            title = f"{item.name} ({item.sku})" if item.sku else item.name
            name_height = p.paragraph(title, 8.4, TEXT_COLOR)
            p.space(name_height + 1)

            qty_line = f"{labels.qty}: {item.qty:g} × {format_amount(item.unit_price, locale)}"
            p.line(qty_line, 7.5, QTY_COLOR, width=label_width)
            p.line(
                money(item.line_total),
                7.5,
                QTY_COLOR,
                x=p.right - p.amount_width,
                width=p.amount_width,
                align="right",
            )
            p.space(11)
            p.separator()

        # === Итоги ===
        p.amount_row(labels.subtotal, money(job.totals.subtotal))
        p.amount_row(labels.total, money(job.totals.total), emphasized=True)

        if job.totals.payments:
            p.space(2)
            p.separator()
            p.line(labels.payments, 8, TEXT_COLOR)
            p.space(11)
            for payment in job.totals.payments:
                p.line(payment.method_label, 7.5, META_COLOR, width=label_width)
                p.line(
                    money(payment.amount),
                    7.5,
                    META_COLOR,
                    x=p.right - p.amount_width,
                    width=p.amount_width,
                    align="right",
                )
                p.space(11)

        # === Фискальный блок ===
        p.space(2)
        p.separator()
        p.line(labels.fiscal_block_title, 8, TEXT_COLOR)
        p.space(11)
        p.meta_line(f"{labels.fiscal_status}: {labels.status_caption(job.fiscal.mode_status)}")

        if job.variant == ReceiptVariant.PRECHECK:
            if job.fiscal.mode_status == FiscalModeStatus.FAILED:
                p.meta_line(labels.fiscal_retry_hint, 7.2)
            return

        if job.fiscal.fiscalized_at:
            p.meta_line(f"{labels.fiscalized_at}: {format_datetime(job.fiscal.fiscalized_at, locale)}")

        fiscal_fields = [
            (labels.kkm_factory_number, job.fiscal.kkm_factory_number),
            (labels.kkm_registration_number, job.fiscal.kkm_registration_number),
            (labels.fiscal_number, job.fiscal.fiscal_number),
            (labels.upfd_or_fiscal_memory, job.fiscal.upfd_or_fiscal_memory),
        ]
        for caption, value in fiscal_fields:
            if not (value or "").strip():
                continue
            p.line(f"{caption}: {value}", 7.5, META_COLOR)
            p.space(10)

        if qr_png:
            p.image(qr_png, PRINT.mm_to_points(PRINT.RECEIPT_QR_MM))
            p.space(2)
            p.line(job.fiscal.qr_payload or "", 6.5, META_COLOR, align="center")
            p.space(10)
        elif job.fiscal.qr_payload:
            # QR не получился — печатаем ссылку текстом
            p.meta_line(f"{labels.qr_payload}: {job.fiscal.qr_payload}", 7.2)
