"""
Pydantic схемы для API.

Модели запросов и ответов.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field

from tagprint.config import PRINT
from tagprint.models.price_tags import (
    BarcodeSymbology,
    PriceTagLabel,
    PriceTagTemplate,
    RollCalibration,
)
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
from tagprint.services.fiscal_metadata import FiscalReceiptResult, resolve_fiscal_metadata

# === Ценники ===


class RollCalibrationIn(BaseModel):
    """Калибровка рулонного принтера (мм)."""

    gap_mm: float = Field(
        default=PRINT.ROLL_GAP_MM,
        ge=PRINT.ROLL_GAP_LIMITS_MM[0],
        le=PRINT.ROLL_GAP_LIMITS_MM[1],
        description="Зазор между этикетками",
    )
    x_offset_mm: float = Field(
        default=PRINT.ROLL_OFFSET_MM,
        ge=PRINT.ROLL_OFFSET_LIMITS_MM[0],
        le=PRINT.ROLL_OFFSET_LIMITS_MM[1],
        description="Сдвиг печати по горизонтали",
    )
    y_offset_mm: float = Field(
        default=PRINT.ROLL_OFFSET_MM,
        ge=PRINT.ROLL_OFFSET_LIMITS_MM[0],
        le=PRINT.ROLL_OFFSET_LIMITS_MM[1],
        description="Сдвиг печати по вертикали",
    )
    width_mm: float = Field(
        default=PRINT.ROLL_WIDTH_MM,
        ge=PRINT.ROLL_WIDTH_LIMITS_MM[0],
        le=PRINT.ROLL_WIDTH_LIMITS_MM[1],
        description="Ширина этикетки",
    )
    height_mm: float = Field(
        default=PRINT.ROLL_HEIGHT_MM,
        ge=PRINT.ROLL_HEIGHT_LIMITS_MM[0],
        le=PRINT.ROLL_HEIGHT_LIMITS_MM[1],
        description="Высота этикетки",
    )

    def to_domain(self) -> RollCalibration:
        return RollCalibration(**self.model_dump())


class PriceTagLabelIn(BaseModel):
    """Товар для печати ценника."""

    name: str = Field(min_length=1, description="Название товара")
    sku: str = Field(default="", description="Артикул")
    barcode: str = Field(default="", description="Штрихкод (пустой — печать без штрихкода)")
    price: float | None = Field(
        default=None,
        ge=0,
        le=PRINT.MAX_AMOUNT,
        allow_inf_nan=False,
        description="Цена (None — «нет цены»)",
    )
    quantity: int = Field(default=1, ge=1, description="Количество копий")

    def to_domain(self) -> PriceTagLabel:
        return PriceTagLabel(name=self.name, sku=self.sku, barcode=self.barcode, price=self.price)


class PriceTagsPdfRequest(BaseModel):
    """Запрос на PDF ценников."""

    template: PriceTagTemplate = Field(default=PriceTagTemplate.GRID_3x8, description="Шаблон")
    labels: list[PriceTagLabelIn] = Field(min_length=1, description="Товары")
    locale: str = Field(default="ru-RU", description="Локаль цены")
    store_name: str | None = Field(default=None, description="Название магазина")
    no_price_label: str = Field(default="Цена не указана")
    no_barcode_label: str = Field(default="Нет штрихкода")
    sku_label: str = Field(default="Артикул")
    allow_without_barcode: bool = Field(
        default=False,
        description="Подтверждение печати рулона для товаров без штрихкода",
    )
    roll_calibration: RollCalibrationIn | None = Field(default=None)

    @property
    def total_copies(self) -> int:
        return sum(label.quantity for label in self.labels)

    def expanded_labels(self) -> list[PriceTagLabel]:
        """Ценники с учётом количества копий, в исходном порядке."""
        result = []
        for label in self.labels:
            result.extend([label.to_domain()] * label.quantity)
        return result


class PriceTagTemplateInfo(BaseModel):
    """Описание шаблона для UI."""

    id: PriceTagTemplate
    is_roll: bool
    cols: int
    rows: int
    per_page: int
    page_width_mm: float
    page_height_mm: float
    calibration_defaults: RollCalibrationIn | None = None


# === Чеки ===


# Сумма чека: конечное число в пределах MAX_AMOUNT
Amount = Annotated[
    float, Field(ge=-PRINT.MAX_AMOUNT, le=PRINT.MAX_AMOUNT, allow_inf_nan=False)
]


class ReceiptItemIn(BaseModel):
    name: str
    qty: float = Field(gt=0, allow_inf_nan=False)
    unit_price: Amount
    line_total: Amount
    sku: str | None = None
    product_id: str | None = None


class ReceiptPaymentIn(BaseModel):
    method: str
    method_label: str
    amount: Amount


class ReceiptTotalsIn(BaseModel):
    subtotal: Amount
    total: Amount
    payments: list[ReceiptPaymentIn] = Field(default_factory=list)


class FiscalInfoIn(BaseModel):
    """
    Фискальные реквизиты чека.

    Явные поля важнее найденных в raw_result (сырой ответ ККМ): недостающие
    реквизиты и статус дополняются из него.
    """

    mode_status: FiscalModeStatus | None = None
    provider_receipt_id: str | None = None
    fiscal_number: str | None = None
    kkm_factory_number: str | None = None
    kkm_registration_number: str | None = None
    upfd_or_fiscal_memory: str | None = None
    qr_payload: str | None = None
    fiscalized_at: datetime | None = None
    last_error: str | None = None
    raw_result: Any = Field(default=None, description="Сырой JSON ответа ККМ")

    def to_domain(self) -> FiscalInfo:
        metadata = resolve_fiscal_metadata(
            FiscalReceiptResult(
                raw_json=self.raw_result,
                fiscal_mode_status=self.mode_status,
                kkm_factory_number=self.kkm_factory_number,
                kkm_registration_number=self.kkm_registration_number,
                upfd_or_fiscal_memory=self.upfd_or_fiscal_memory,
                qr_payload=self.qr_payload,
            ),
            fallback_status=FiscalModeStatus.NOT_SENT,
        )
        return FiscalInfo(
            mode_status=metadata.fiscal_mode_status,
            provider_receipt_id=self.provider_receipt_id,
            fiscal_number=self.fiscal_number,
            kkm_factory_number=metadata.kkm_factory_number,
            kkm_registration_number=metadata.kkm_registration_number,
            upfd_or_fiscal_memory=metadata.upfd_or_fiscal_memory,
            qr_payload=metadata.qr_payload,
            fiscalized_at=self.fiscalized_at,
            last_error=self.last_error,
        )


class ReceiptJobIn(BaseModel):
    """Продажа для печати чека."""

    number: str = Field(min_length=1, description="Номер продажи")
    created_at: datetime
    store_name: str
    items: list[ReceiptItemIn] = Field(default_factory=list)
    totals: ReceiptTotalsIn
    variant: ReceiptVariant = ReceiptVariant.PRECHECK
    fiscal: FiscalInfoIn = Field(default_factory=FiscalInfoIn)
    locale: str = "ru-RU"
    legal_name: str | None = None
    inn: str | None = None
    address: str | None = None
    phone: str | None = None
    register_name: str | None = None
    cashier_name: str | None = None
    shift_label: str | None = None
    sale_id: str | None = None
    store_id: str | None = None

    def to_domain(self) -> ReceiptJob:
        data = self.model_dump(exclude={"items", "totals", "fiscal"})
        return ReceiptJob(
            **data,
            items=[ReceiptItem(**item.model_dump()) for item in self.items],
            totals=ReceiptTotals(
                subtotal=self.totals.subtotal,
                total=self.totals.total,
                payments=[ReceiptPayment(**p.model_dump()) for p in self.totals.payments],
            ),
            fiscal=self.fiscal.to_domain(),
        )


class ReceiptLabelsIn(BaseModel):
    """Переведённые подписи чека. Незаданные берутся по умолчанию (русские)."""

    title: str | None = None
    precheck_title: str | None = None
    precheck_hint: str | None = None
    fiscal_block_title: str | None = None
    fiscal_status: str | None = None
    fiscal_status_sent: str | None = None
    fiscal_status_not_sent: str | None = None
    fiscal_status_failed: str | None = None
    fiscal_retry_hint: str | None = None
    fiscalized_at: str | None = None
    kkm_factory_number: str | None = None
    kkm_registration_number: str | None = None
    fiscal_number: str | None = None
    upfd_or_fiscal_memory: str | None = None
    qr_payload: str | None = None
    sale_number: str | None = None
    created_at: str | None = None
    register: str | None = None
    cashier: str | None = None
    shift: str | None = None
    inn: str | None = None
    address: str | None = None
    phone: str | None = None
    qty: str | None = None
    subtotal: str | None = None
    total: str | None = None
    payments: str | None = None

    def to_domain(self) -> ReceiptLabels:
        return ReceiptLabels(**self.model_dump(exclude_none=True))


class ReceiptPdfRequest(BaseModel):
    """Запрос на PDF чека."""

    job: ReceiptJobIn
    labels: ReceiptLabelsIn = Field(default_factory=ReceiptLabelsIn)


# === Штрихкоды ===


class BarcodeResolveRequest(BaseModel):
    """Штрихкоды товара для проверки перед печатью."""

    values: list[str] = Field(min_length=1, max_length=500)


class BarcodeResolveItem(BaseModel):
    value: str = Field(description="Исходное значение")
    symbology: BarcodeSymbology | None = Field(description="Символика (None — печатать нечего)")
    text: str | None = Field(description="Нормализованное значение для печати")


class BarcodeResolveResponse(BaseModel):
    primary: str = Field(description="Основной штрихкод (пустой — нет ни одного)")
    items: list[BarcodeResolveItem]


class BarcodeGenerateRequest(BaseModel):
    """Подбор внутреннего штрихкода организации."""

    organization_id: str = Field(min_length=1)
    mode: BarcodeSymbology = BarcodeSymbology.EAN13
    existing: list[str] = Field(default_factory=list, description="Уже занятые значения")
    start_sequence: int | None = Field(default=None, ge=0)


class BarcodeGenerateResponse(BaseModel):
    value: str
    symbology: BarcodeSymbology
