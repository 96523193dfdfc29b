# backend/tagprint/services/barcodes.py
"""
Работа со значениями штрихкодов.

- Нормализация и контрольная цифра EAN-13
- Выбор символики для печати (EAN-13 или Code128)
- Генерация уникальных внутренних штрихкодов организации
"""

import hashlib
import logging
import re
import time
from collections.abc import Awaitable, Callable, Iterable

from tagprint.models.price_tags import BarcodeRenderSpec, BarcodeSymbology

logger = logging.getLogger(__name__)

# Внутренний префикс EAN-13 (диапазон 20-29 зарезервирован под магазинные коды)
INTERNAL_EAN_PREFIX = "29"
INTERNAL_CODE128_PREFIX = "BZ"
ORG_HASH_LENGTH = 4
EAN_SEQUENCE_LENGTH = 6
CODE128_SEQUENCE_LENGTH = 8
DEFAULT_MAX_ATTEMPTS = 500

_WHITESPACE_RE = re.compile(r"\s+")
_DIGITS_12_RE = re.compile(r"[0-9]{12}")
_DIGITS_13_RE = re.compile(r"[0-9]{13}")


class BarcodeError(Exception):
    """Базовая ошибка работы со штрихкодами."""


class InvalidBarcodeInputError(BarcodeError, ValueError):
    """Неверный вход для контрольной цифры (нужно ровно 12 цифр)."""


class BarcodeGenerationExhaustedError(BarcodeError):
    """Не нашли свободный штрихкод за отведённое число попыток."""


def normalize_barcode_value(value: str) -> str:
    """Убирает все пробельные символы."""
    return _WHITESPACE_RE.sub("", value or "")


def compute_ean13_check_digit(digits12: str) -> str:
    """
    Вычисляет контрольную цифру EAN-13.

    Args:
        digits12: Ровно 12 цифр

    Returns:
        Контрольная цифра строкой

    Raises:
        InvalidBarcodeInputError: Если вход не 12 цифр
    """
    if not _DIGITS_12_RE.fullmatch(digits12 or ""):
        raise InvalidBarcodeInputError("EAN13_CHECK_DIGIT_REQUIRES_12_DIGITS")

    total = 0
    for i, digit in enumerate(digits12):
        if i % 2 == 0:
            total += int(digit)
        else:
            total += int(digit) * 3

    return str((10 - (total % 10)) % 10)


def is_valid_ean13(value: str) -> bool:
    """13 цифр и верная контрольная цифра."""
    normalized = normalize_barcode_value(value)
    if not _DIGITS_13_RE.fullmatch(normalized):
        return False
    return compute_ean13_check_digit(normalized[:12]) == normalized[12]


def resolve_barcode_render_spec(value: str) -> BarcodeRenderSpec | None:
    """
    Определяет, как печатать значение.

    Невалидный EAN-13 не отклоняется, а печатается как Code128.
    """
    normalized = normalize_barcode_value(value)
    if not normalized:
        return None

    if is_valid_ean13(normalized):
        return BarcodeRenderSpec(symbology=BarcodeSymbology.EAN13, text=normalized)

    return BarcodeRenderSpec(symbology=BarcodeSymbology.CODE128, text=normalized)


def select_primary_barcode_value(values: Iterable[str]) -> str:
    """Из штрихкодов товара выбирает основной: первый EAN-13, иначе первый непустой."""
    normalized = [v for v in (normalize_barcode_value(value) for value in values) if v]
    if not normalized:
        return ""

    for value in normalized:
        if is_valid_ean13(value):
            return value

    return normalized[0]


def _hash_to_digits(value: str, length: int) -> str:
    """Отпечаток строки из цифр: hex-символы SHA-1 по модулю 10."""
    digest = hashlib.sha1(value.encode("utf-8")).hexdigest()
    digits = "".join(str(int(char, 16) % 10) for char in digest[:length])
    return digits.ljust(length, "0")


def _normalize_sequence(sequence: int, modulus: int) -> int:
    # int() отбрасывает дробную часть к нулю, % в Python всегда неотрицателен
    return int(sequence) % modulus


def build_generated_barcode_candidate(
    organization_id: str,
    mode: BarcodeSymbology,
    sequence: int,
) -> str:
    """
    Кандидат внутреннего штрихкода организации.

    EAN-13: "29" + 4 цифры отпечатка + 6 цифр последовательности + контрольная.
    Code128: "BZ" + 4 цифры отпечатка + 8 цифр последовательности.
    """
    org_hash = _hash_to_digits(organization_id, ORG_HASH_LENGTH)

    if mode == BarcodeSymbology.EAN13:
        seq = _normalize_sequence(sequence, 10**EAN_SEQUENCE_LENGTH)
        body = f"{INTERNAL_EAN_PREFIX}{org_hash}{seq:0{EAN_SEQUENCE_LENGTH}d}"
        return body + compute_ean13_check_digit(body)

    seq = _normalize_sequence(sequence, 10**CODE128_SEQUENCE_LENGTH)
    return f"{INTERNAL_CODE128_PREFIX}{org_hash}{seq:0{CODE128_SEQUENCE_LENGTH}d}"


async def resolve_unique_generated_barcode(
    organization_id: str,
    mode: BarcodeSymbology,
    is_taken: Callable[[str], Awaitable[bool]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    start_sequence: int | None = None,
) -> str:
    """
    Подбирает свободный штрихкод перебором последовательности.

    Блокировок нет: уникальность проверяет вызывающий (обычно запросом в БД),
    гонка между проверкой и сохранением допустима.

    Args:
        organization_id: ID организации (для отпечатка)
        mode: EAN13 или CODE128
        is_taken: Асинхронная проверка занятости значения
        max_attempts: Сколько последовательных значений пробовать
        start_sequence: Начало перебора (по умолчанию текущее время в мс)

    Returns:
        Первый свободный кандидат

    Raises:
        BarcodeGenerationExhaustedError: Все кандидаты заняты
    """
    if start_sequence is None:
        start_sequence = time.time_ns() // 1_000_000

    for attempt in range(max_attempts):
        candidate = build_generated_barcode_candidate(
            organization_id=organization_id,
            mode=mode,
            sequence=start_sequence + attempt,
        )
        if not await is_taken(candidate):
            if attempt:
                logger.info(
                    f"Штрихкод подобран: {candidate}",
                    extra={"organization_id": organization_id, "attempts": attempt + 1},
                )
            return candidate

    logger.warning(
        "Не удалось подобрать штрихкод",
        extra={"organization_id": organization_id, "mode": mode.value, "attempts": max_attempts},
    )
    raise BarcodeGenerationExhaustedError("BARCODE_GENERATION_EXHAUSTED")
