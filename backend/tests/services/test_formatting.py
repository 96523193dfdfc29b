"""Тесты форматирования сумм и дат."""

from datetime import datetime

import pytest

from tagprint.services.formatting import (
    NARROW_NBSP,
    NBSP,
    format_amount,
    format_currency,
    format_datetime,
)


class TestFormatAmount:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (0, "0,00"),
            (42, "42,00"),
            (1234.5, f"1{NARROW_NBSP}234,50"),
            (1234567.891, f"1{NARROW_NBSP}234{NARROW_NBSP}567,89"),
            (-15.5, "-15,50"),
        ],
    )
    def test_ru(self, amount, expected):
        assert format_amount(amount, "ru-RU") == expected

    def test_en(self):
        assert format_amount(1234567.891, "en-US") == "1,234,567.89"

    def test_half_up_rounding(self):
        assert format_amount(2.675, "en-US") == "2.68"

    def test_unknown_locale_falls_back_to_ru(self):
        assert format_amount(1000, "de-DE") == f"1{NARROW_NBSP}000,00"

    def test_huge_amount_keeps_all_digits(self):
        expected = NARROW_NBSP.join(["100"] + ["000"] * 8) + ",00"
        assert format_amount(1e26, "ru-RU") == expected

    @pytest.mark.parametrize("amount", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_rejected(self, amount):
        with pytest.raises(ValueError):
            format_amount(amount, "ru-RU")


class TestFormatCurrency:
    def test_kgs_ru(self):
        assert format_currency(1234.5, "ru-RU") == f"1{NARROW_NBSP}234,50{NBSP}сом"

    def test_kgs_ky(self):
        assert format_currency(15, "ky-KG") == f"15,00{NBSP}сом"

    def test_en_prefix_code(self):
        assert format_currency(1234.5, "en-US") == f"KGS{NBSP}1,234.50"

    def test_other_currency(self):
        assert format_currency(10, "ru-RU", "RUB") == f"10,00{NBSP}₽"


class TestFormatDatetime:
    def test_ru(self):
        assert format_datetime(datetime(2026, 3, 5, 9, 7), "ru-RU") == "05.03.2026, 09:07"

    def test_en(self):
        assert format_datetime(datetime(2026, 3, 5, 9, 7), "en-US") == "03/05/2026, 09:07"
