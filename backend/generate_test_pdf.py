"""
Тестовый скрипт для генерации PDF ценников и чека.
Запуск: cd backend && .venv/Scripts/python generate_test_pdf.py
"""
import sys
from datetime import datetime
from pathlib import Path

# Добавляем путь к tagprint
sys.path.insert(0, str(Path(__file__).parent))

from tagprint.models.price_tags import PriceTagLabel, RollCalibration
from tagprint.models.receipt import (
    FiscalInfo,
    FiscalModeStatus,
    ReceiptItem,
    ReceiptJob,
    ReceiptPayment,
    ReceiptTotals,
    ReceiptVariant,
)
from tagprint.services.price_tags_pdf import PriceTagsPdfGenerator
from tagprint.services.receipt_pdf import ReceiptPdfGenerator


def main():
    # Три товара: длинное название без цены / обычный / буквенный штрихкод
    labels = [
        PriceTagLabel(
            name="Очень длинное название продукта с кириллицей и дополнительными словами",
            sku="SKU-VERY-LONG-001",
            barcode="5901234123457",
            price=None,
        ),
        PriceTagLabel(name="Молоко 3.2%", sku="SKU-002", barcode="123456789012", price=42),
        PriceTagLabel(name="Хлеб", sku="SKU-003-EXTRA-LONG", barcode="ABC-123-XYZ", price=15),
    ]

    output_dir = Path(__file__).parent.parent / "test"
    output_dir.mkdir(exist_ok=True)

    generator = PriceTagsPdfGenerator()
    for template in ("3x8", "2x5", "xp365b-roll-58x40"):
        pdf_bytes = generator.generate(
            labels=labels,
            template=template,
            locale="ru-RU",
            store_name="Магазин Центр",
            no_price_label="Цена не задана",
            no_barcode_label="Нет штрихкода",
            sku_label="Артикул",
            roll_calibration=RollCalibration(),
        )
        output_path = output_dir / f"price-tags-{template}.pdf"
        output_path.write_bytes(pdf_bytes)
        print(f"Ценники {template} сохранены: {output_path}")

    job = ReceiptJob(
        number="S-000123",
        created_at=datetime(2026, 3, 5, 14, 30),
        store_name="Магазин Центр",
        legal_name="ОсОО «Тест Ритейл»",
        inn="01234567890123",
        address="г. Бишкек, ул. Киевская, 1",
        cashier_name="Айгуль",
        items=[
            ReceiptItem(name="Молоко 3.2%", qty=2, unit_price=42, line_total=84, sku="SKU-002"),
            ReceiptItem(name="Хлеб", qty=1, unit_price=15, line_total=15),
        ],
        totals=ReceiptTotals(
            subtotal=99,
            total=99,
            payments=[ReceiptPayment(method="CASH", method_label="Наличные", amount=99)],
        ),
        variant=ReceiptVariant.FISCAL,
        fiscal=FiscalInfo(
            mode_status=FiscalModeStatus.SENT,
            fiscal_number="123",
            kkm_registration_number="0000000001",
            qr_payload="https://kkm.salyk.kg/kkm/check?rnm=0000000001&fd=123",
            fiscalized_at=datetime(2026, 3, 5, 14, 31),
        ),
    )
    output_path = output_dir / "pos-receipt-fiscal.pdf"
    output_path.write_bytes(ReceiptPdfGenerator().generate(job))
    print(f"Чек сохранён: {output_path}")


if __name__ == "__main__":
    main()
