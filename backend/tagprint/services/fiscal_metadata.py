# backend/tagprint/services/fiscal_metadata.py
"""
Извлечение фискальных реквизитов из ответа ККМ.

Разные ККМ/коннекторы называют одни и те же поля по-разному, поэтому
для каждого реквизита перебирается список известных ключей (поддерживаются
вложенные пути через точку).
"""

from dataclasses import dataclass
from typing import Any

from tagprint.models.receipt import FiscalModeStatus

FACTORY_NUMBER_PATHS = (
    "kkmFactoryNumber",
    "kkm_factory_number",
    "factoryNumber",
    "factoryNo",
    "serialNumber",
    "kkmSerialNumber",
)
REGISTRATION_NUMBER_PATHS = (
    "kkmRegistrationNumber",
    "kkm_registration_number",
    "registrationNumber",
    "registrationNo",
)
STATUS_PATHS = ("fiscalModeStatus", "sentToOFD", "sentToGNS", "ofdStatus", "gnsStatus")
UPFD_PATHS = (
    "upfdOrFiscalMemory",
    "upfd",
    "fiscalMemoryNumber",
    "fiscalMemorySerial",
    "fnNumber",
    "fiscalStorageNumber",
)
QR_PATHS = ("qrPayload", "qr", "qrCode", "qrValue", "ofdQr", "ofdLink")

_SENT_VALUES = {"SENT", "SUCCESS", "OK"}
_FAILED_VALUES = {"FAILED", "ERROR"}
_NOT_SENT_VALUES = {"NOT_SENT", "PENDING", "QUEUED"}


@dataclass(frozen=True)
class FiscalMetadata:
    """Реквизиты, найденные в ответе ККМ (None — не найдено)."""

    kkm_factory_number: str | None = None
    kkm_registration_number: str | None = None
    fiscal_mode_status: FiscalModeStatus | None = None
    upfd_or_fiscal_memory: str | None = None
    qr_payload: str | None = None


@dataclass
class FiscalReceiptResult:
    """Результат фискализации от адаптера ККМ: явные поля + сырой JSON."""

    raw_json: Any = None
    fiscal_mode_status: FiscalModeStatus | None = None
    kkm_factory_number: str | None = None
    kkm_registration_number: str | None = None
    upfd_or_fiscal_memory: str | None = None
    qr_payload: str | None = None


def _read_path(source: dict, path: str) -> Any:
    current: Any = source
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _to_nullable_string(value: Any) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip()
    return normalized or None


def _pick_first_string(source: Any, paths: tuple[str, ...]) -> str | None:
    if not isinstance(source, dict):
        return None
    for path in paths:
        value = _to_nullable_string(_read_path(source, path))
        if value:
            return value
    return None


def parse_fiscal_mode_status(value: Any) -> FiscalModeStatus | None:
    """
    Статус отправки из значения ККМ.

    Булево: True -> SENT, False -> NOT_SENT. Строки сравниваются без регистра,
    неизвестные значения дают None.
    """
    if isinstance(value, bool):
        return FiscalModeStatus.SENT if value else FiscalModeStatus.NOT_SENT
    if not isinstance(value, str):
        return None

    normalized = value.strip().upper()
    if normalized in _SENT_VALUES:
        return FiscalModeStatus.SENT
    if normalized in _FAILED_VALUES:
        return FiscalModeStatus.FAILED
    if normalized in _NOT_SENT_VALUES:
        return FiscalModeStatus.NOT_SENT
    return None


def extract_fiscal_metadata(source: Any) -> FiscalMetadata:
    """Ищет реквизиты в произвольном JSON ответа ККМ."""
    mode_raw = None
    if isinstance(source, dict):
        for path in STATUS_PATHS:
            value = _read_path(source, path)
            if value is not None and value != "":
                mode_raw = value
                break

    return FiscalMetadata(
        kkm_factory_number=_pick_first_string(source, FACTORY_NUMBER_PATHS),
        kkm_registration_number=_pick_first_string(source, REGISTRATION_NUMBER_PATHS),
        fiscal_mode_status=parse_fiscal_mode_status(mode_raw),
        upfd_or_fiscal_memory=_pick_first_string(source, UPFD_PATHS),
        qr_payload=_pick_first_string(source, QR_PATHS),
    )


def resolve_fiscal_metadata(
    result: FiscalReceiptResult,
    fallback_status: FiscalModeStatus,
) -> FiscalMetadata:
    """
    Итоговые реквизиты: явные поля адаптера важнее найденных в сыром JSON.

    Статус всегда определён: явный, из JSON или fallback_status.
    """
    raw = extract_fiscal_metadata(result.raw_json)

    def prefer(explicit, found):
        return explicit if explicit is not None else found

    return FiscalMetadata(
        kkm_factory_number=prefer(result.kkm_factory_number, raw.kkm_factory_number),
        kkm_registration_number=prefer(result.kkm_registration_number, raw.kkm_registration_number),
        fiscal_mode_status=result.fiscal_mode_status or raw.fiscal_mode_status or fallback_status,
        upfd_or_fiscal_memory=prefer(result.upfd_or_fiscal_memory, raw.upfd_or_fiscal_memory),
        qr_payload=prefer(result.qr_payload, raw.qr_payload),
    )
