# backend/tagprint/services/formatting.py
"""
Форматирование сумм и дат под локаль чека/ценника.

Поддерживаются семейства локалей ru/ky (по умолчанию) и en.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

NARROW_NBSP = "\u202f"
NBSP = "\u00a0"


@dataclass(frozen=True)
class _NumberStyle:
    group: str
    decimal: str
    currency_suffix: bool
    date_format: str


_STYLES = {
    "ru": _NumberStyle(group=NARROW_NBSP, decimal=",", currency_suffix=True, date_format="%d.%m.%Y, %H:%M"),
    "ky": _NumberStyle(group=NARROW_NBSP, decimal=",", currency_suffix=True, date_format="%d.%m.%Y, %H:%M"),
    "en": _NumberStyle(group=",", decimal=".", currency_suffix=False, date_format="%m/%d/%Y, %H:%M"),
}

# Символы валют для суффиксной записи
_CURRENCY_SYMBOLS = {
    "KGS": "сом",
    "RUB": "₽",
    "KZT": "₸",
    "USD": "$",
}


def _style(locale: str) -> _NumberStyle:
    language = (locale or "").replace("_", "-").split("-")[0].lower()
    return _STYLES.get(language, _STYLES["ru"])


def format_amount(amount: float, locale: str) -> str:
    """
    Сумма с двумя знаками после запятой и разделителем разрядов.

    Raises:
        ValueError: сумма не конечное число (inf/nan)
    """
    if not math.isfinite(amount):
        raise ValueError(f"Сумма должна быть конечным числом: {amount}")

    style = _style(locale)
    with localcontext() as ctx:
        value = Decimal(str(amount))
        # Точности хватает на все разряды целой части плюс копейки
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""
        integer, fraction = f"{abs(value):.2f}".split(".")

    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)

    return f"{sign}{style.group.join(groups)}{style.decimal}{fraction}"


def format_currency(amount: float, locale: str, currency: str = "KGS") -> str:
    """Сумма с валютой: "1 234,50 сом" (ru) или "KGS 1,234.50" (en)."""
    style = _style(locale)
    number = format_amount(amount, locale)
    if style.currency_suffix:
        return f"{number}{NBSP}{_CURRENCY_SYMBOLS.get(currency, currency)}"
    return f"{currency}{NBSP}{number}"


def format_datetime(value: datetime, locale: str) -> str:
    """Дата и время без секунд."""
    return value.strftime(_style(locale).date_format)
