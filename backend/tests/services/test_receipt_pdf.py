"""Тесты для генератора PDF чека POS."""

import io
from datetime import datetime

import pikepdf
import pytest

from tagprint.config import PRINT
from tagprint.models.receipt import (
    FiscalInfo,
    FiscalModeStatus,
    ReceiptItem,
    ReceiptJob,
    ReceiptLabels,
    ReceiptPayment,
    ReceiptTotals,
    ReceiptVariant,
)
from tagprint.services.barcode_generator import RasterDegraded
from tagprint.services.qr_generator import QrGenerator
from tagprint.services.receipt_pdf import ReceiptPdfGenerator

QR_LINK = "https://kkm.salyk.kg/kkm/check?rnm=0000000001&fd=123&fm=456"


class FailingQrGenerator(QrGenerator):
    def __init__(self):
        super().__init__()
        self.payloads: list[str] = []

    def generate(self, payload: str):
        self.payloads.append(payload)
        return RasterDegraded(reason="qr failed")


def make_job(variant: ReceiptVariant = ReceiptVariant.PRECHECK, items_count: int = 2, **fiscal) -> ReceiptJob:
    items = [
        ReceiptItem(
            name=f"Товар номер {i} с достаточно длинным названием для переноса",
            qty=2,
            unit_price=150.5,
            line_total=301,
            sku=f"SKU-{i}",
        )
        for i in range(items_count)
    ]
    total = 301.0 * items_count
    return ReceiptJob(
        number="S-000123",
        created_at=datetime(2026, 3, 5, 14, 30),
        store_name="Магазин Центр",
        legal_name="ОсОО «Тест Ритейл»",
        inn="01234567890123",
        address="г. Бишкек, ул. Киевская, 1",
        phone="+996 555 000 000",
        register_name="Касса 1",
        cashier_name="Айгуль",
        shift_label="Смена 12",
        items=items,
        totals=ReceiptTotals(
            subtotal=total,
            total=total,
            payments=[
                ReceiptPayment(method="CASH", method_label="Наличные", amount=total - 100),
                ReceiptPayment(method="CARD", method_label="Карта", amount=100),
            ],
        ),
        variant=variant,
        fiscal=FiscalInfo(**fiscal),
    )


def page_size(pdf_bytes: bytes) -> tuple[float, float]:
    pdf = pikepdf.open(io.BytesIO(pdf_bytes))
    page = pdf.pages[0]
    return float(page.mediabox[2]), float(page.mediabox[3])


class TestReceiptPdf:
    def test_precheck(self):
        pdf_bytes = ReceiptPdfGenerator().generate(make_job(), ReceiptLabels())

        assert pdf_bytes.startswith(b"%PDF-")
        pdf = pikepdf.open(io.BytesIO(pdf_bytes))
        assert len(pdf.pages) == 1

    def test_width_is_58mm(self):
        width, _height = page_size(ReceiptPdfGenerator().generate(make_job()))
        assert width == pytest.approx(PRINT.mm_to_points(58), abs=0.01)

    def test_minimum_height(self):
        """Пустой чек не короче 62мм."""
        job = make_job(items_count=0)
        job.totals.payments = []

        _width, height = page_size(ReceiptPdfGenerator().generate(job))

        assert height >= PRINT.mm_to_points(PRINT.RECEIPT_MIN_HEIGHT_MM) - 0.01

    def test_height_grows_with_items(self):
        generator = ReceiptPdfGenerator()
        _w, short = page_size(generator.generate(make_job(items_count=1)))
        _w, long = page_size(generator.generate(make_job(items_count=10)))

        assert long > short

    def test_fiscal_with_qr(self):
        job = make_job(
            ReceiptVariant.FISCAL,
            mode_status=FiscalModeStatus.SENT,
            fiscal_number="123",
            kkm_factory_number="KKM-0001",
            kkm_registration_number="0000000001",
            upfd_or_fiscal_memory="FM-456",
            qr_payload=QR_LINK,
            fiscalized_at=datetime(2026, 3, 5, 14, 31),
        )

        pdf_bytes = ReceiptPdfGenerator().generate(job)

        pdf = pikepdf.open(io.BytesIO(pdf_bytes))
        assert len(pdf.pages[0].images) == 1

    def test_fiscal_is_taller_than_precheck_with_qr(self):
        generator = ReceiptPdfGenerator()
        _w, precheck = page_size(generator.generate(make_job()))
        _w, fiscal = page_size(
            generator.generate(make_job(ReceiptVariant.FISCAL, qr_payload=QR_LINK))
        )

        assert fiscal > precheck

    def test_qr_failure_prints_payload_text(self):
        """QR не сгенерирован — чек печатается без изображения."""
        qr_generator = FailingQrGenerator()
        job = make_job(ReceiptVariant.FISCAL, mode_status=FiscalModeStatus.SENT, qr_payload=QR_LINK)

        pdf_bytes = ReceiptPdfGenerator(qr_generator=qr_generator).generate(job)

        assert qr_generator.payloads == [QR_LINK]
        pdf = pikepdf.open(io.BytesIO(pdf_bytes))
        assert len(pdf.pages[0].images) == 0

    def test_precheck_never_generates_qr(self):
        qr_generator = FailingQrGenerator()

        ReceiptPdfGenerator(qr_generator=qr_generator).generate(make_job(qr_payload=QR_LINK))

        assert qr_generator.payloads == []

    def test_failed_precheck_with_retry_hint(self):
        job = make_job(mode_status=FiscalModeStatus.FAILED, last_error="timeout")
        assert ReceiptPdfGenerator().generate(job).startswith(b"%PDF-")

    def test_deterministic_output(self):
        job = make_job(ReceiptVariant.FISCAL, qr_payload=QR_LINK)

        first = ReceiptPdfGenerator().generate(job)
        second = ReceiptPdfGenerator().generate(job)

        assert first == second


class TestReceiptLabels:
    def test_status_captions(self):
        labels = ReceiptLabels()

        assert labels.status_caption(FiscalModeStatus.SENT) == labels.fiscal_status_sent
        assert labels.status_caption(FiscalModeStatus.FAILED) == labels.fiscal_status_failed
        assert labels.status_caption(FiscalModeStatus.NOT_SENT) == labels.fiscal_status_not_sent

    def test_business_name_prefers_legal_name(self):
        job = make_job()
        assert job.business_name == "ОсОО «Тест Ритейл»"

        job.legal_name = "   "
        assert job.business_name == "Магазин Центр"
