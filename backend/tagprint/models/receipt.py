# backend/tagprint/models/receipt.py
"""
Типы данных для печати чеков POS.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ReceiptVariant(str, Enum):
    """Вариант чека."""

    PRECHECK = "PRECHECK"  # Предчек (нефискальный)
    FISCAL = "FISCAL"  # Фискальный чек ККМ


class FiscalModeStatus(str, Enum):
    """Статус отправки чека в ККМ/ОФД."""

    SENT = "SENT"
    NOT_SENT = "NOT_SENT"
    FAILED = "FAILED"


@dataclass
class ReceiptItem:
    """Строка чека."""

    name: str
    qty: float
    unit_price: float
    line_total: float
    sku: str | None = None
    product_id: str | None = None


@dataclass
class ReceiptPayment:
    """Оплата одним способом."""

    method: str
    method_label: str
    amount: float


@dataclass
class ReceiptTotals:
    """Итоги чека."""

    subtotal: float
    total: float
    payments: list[ReceiptPayment] = field(default_factory=list)


@dataclass
class FiscalInfo:
    """Фискальные реквизиты (заполнены для FISCAL после ответа ККМ)."""

    mode_status: FiscalModeStatus = FiscalModeStatus.NOT_SENT
    provider_receipt_id: str | None = None
    fiscal_number: str | None = None
    kkm_factory_number: str | None = None
    kkm_registration_number: str | None = None
    upfd_or_fiscal_memory: str | None = None
    qr_payload: str | None = None
    fiscalized_at: datetime | None = None
    last_error: str | None = None


@dataclass
class ReceiptJob:
    """Продажа, готовая к печати."""

    number: str
    created_at: datetime
    store_name: str
    items: list[ReceiptItem]
    totals: ReceiptTotals
    variant: ReceiptVariant = ReceiptVariant.PRECHECK
    fiscal: FiscalInfo = field(default_factory=FiscalInfo)
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

    @property
    def business_name(self) -> str:
        """Юрлицо, если задано, иначе название магазина."""
        legal = (self.legal_name or "").strip()
        return legal or self.store_name


@dataclass(frozen=True)
class ReceiptLabels:
    """Переведённые подписи чека (рендер сам ничего не переводит)."""

    title: str = "ЧЕК"
    precheck_title: str = "ПРЕДЧЕК"
    precheck_hint: str = "Не является фискальным документом"
    fiscal_block_title: str = "Фискальные данные"
    fiscal_status: str = "Статус ККМ"
    fiscal_status_sent: str = "Отправлен"
    fiscal_status_not_sent: str = "Не отправлен"
    fiscal_status_failed: str = "Ошибка"
    fiscal_retry_hint: str = "Повторите фискализацию через менеджера"
    fiscalized_at: str = "Фискализирован"
    kkm_factory_number: str = "Заводской № ККМ"
    kkm_registration_number: str = "Рег. № ККМ"
    fiscal_number: str = "ФД №"
    upfd_or_fiscal_memory: str = "УПФД/ФП"
    qr_payload: str = "QR"
    sale_number: str = "Продажа №"
    created_at: str = "Дата"
    register: str = "Касса"
    cashier: str = "Кассир"
    shift: str = "Смена"
    inn: str = "ИНН"
    address: str = "Адрес"
    phone: str = "Телефон"
    qty: str = "Кол-во"
    subtotal: str = "Подытог"
    total: str = "Итого"
    payments: str = "Оплата"

    def status_caption(self, status: FiscalModeStatus) -> str:
        """Подпись для статуса ККМ."""
        if status is FiscalModeStatus.SENT:
            return self.fiscal_status_sent
        if status is FiscalModeStatus.FAILED:
            return self.fiscal_status_failed
        return self.fiscal_status_not_sent
