"""Тесты для значений штрихкодов: EAN-13, символика, генерация внутренних кодов."""

import random

import pytest

from tagprint.models.price_tags import BarcodeSymbology
from tagprint.services.barcodes import (
    BarcodeGenerationExhaustedError,
    InvalidBarcodeInputError,
    build_generated_barcode_candidate,
    compute_ean13_check_digit,
    is_valid_ean13,
    normalize_barcode_value,
    resolve_barcode_render_spec,
    resolve_unique_generated_barcode,
    select_primary_barcode_value,
)


class TestEan13CheckDigit:
    def test_known_check_digit(self):
        """590123412345 → 7 (5901234123457)."""
        assert compute_ean13_check_digit("590123412345") == "7"

    def test_zero_check_digit(self):
        """Сумма кратна 10 → контрольная 0."""
        assert compute_ean13_check_digit("000000000000") == "0"

    @pytest.mark.parametrize("value", ["12345", "12345678901a", "", "1234567890123"])
    def test_rejects_invalid_input(self, value):
        """Не 12 цифр — ошибка."""
        with pytest.raises(InvalidBarcodeInputError, match="EAN13_CHECK_DIGIT_REQUIRES_12_DIGITS"):
            compute_ean13_check_digit(value)

    def test_invalid_input_is_value_error(self):
        """Ошибку можно ловить как ValueError."""
        with pytest.raises(ValueError):
            compute_ean13_check_digit("abc")

    def test_is_valid_ean13(self):
        assert is_valid_ean13("5901234123457") is True
        assert is_valid_ean13("5901234123458") is False
        assert is_valid_ean13("590123412345") is False
        assert is_valid_ean13(" 5901234 123457 ") is True

    @pytest.mark.parametrize("seed", range(5))
    def test_any_12_digits_complete_to_valid_ean13(self, seed):
        """Любые 12 цифр + контрольная — валидный EAN-13, другая контрольная — нет."""
        rng = random.Random(seed)
        for _ in range(200):
            body = "".join(rng.choice("0123456789") for _ in range(12))
            check = compute_ean13_check_digit(body)

            assert is_valid_ean13(body + check)
            assert resolve_barcode_render_spec(body + check).symbology == BarcodeSymbology.EAN13
            wrong = str((int(check) + rng.randint(1, 9)) % 10)
            assert not is_valid_ean13(body + wrong)


class TestRenderSpec:
    def test_empty_value_has_no_spec(self):
        """Пустой или пробельный штрихкод — печатать нечего."""
        assert resolve_barcode_render_spec("") is None
        assert resolve_barcode_render_spec("   ") is None

    def test_valid_ean13(self):
        spec = resolve_barcode_render_spec(" 5901 2341 23457 ")
        assert spec.symbology == BarcodeSymbology.EAN13
        assert spec.text == "5901234123457"

    def test_wrong_check_digit_falls_back_to_code128(self):
        """13 цифр с неверной контрольной печатаются как Code128, а не отклоняются."""
        spec = resolve_barcode_render_spec("4601234567890")
        assert spec.symbology == BarcodeSymbology.CODE128
        assert spec.text == "4601234567890"

    def test_arbitrary_text_is_code128(self):
        spec = resolve_barcode_render_spec("SKU-001")
        assert spec.symbology == BarcodeSymbology.CODE128
        assert spec.cache_key == "CODE128:SKU-001"

    def test_normalize_removes_all_whitespace(self):
        assert normalize_barcode_value(" 12\t34\n56 ") == "123456"


class TestPrimaryBarcode:
    def test_prefers_valid_ean13(self):
        assert select_primary_barcode_value(["SKU-1", "", "5901234123457"]) == "5901234123457"

    def test_first_non_empty_without_ean(self):
        assert select_primary_barcode_value(["  ", "ABC", "DEF"]) == "ABC"

    def test_empty_list(self):
        assert select_primary_barcode_value([]) == ""


class TestGeneratedCandidate:
    def test_ean13_candidate_is_valid(self):
        value = build_generated_barcode_candidate("org-1", BarcodeSymbology.EAN13, 42)

        assert len(value) == 13
        assert value.startswith("29")
        assert value[6:12] == "000042"
        assert is_valid_ean13(value)

    def test_code128_candidate(self):
        value = build_generated_barcode_candidate("org-1", BarcodeSymbology.CODE128, 42)

        assert len(value) == 14
        assert value.startswith("BZ")
        assert value[2:6].isdigit()
        assert value.endswith("00000042")

    def test_candidate_is_deterministic(self):
        first = build_generated_barcode_candidate("org-1", BarcodeSymbology.EAN13, 7)
        second = build_generated_barcode_candidate("org-1", BarcodeSymbology.EAN13, 7)
        assert first == second

    def test_organization_hash_is_shared(self):
        """Отпечаток организации один и тот же для EAN-13 и Code128."""
        ean = build_generated_barcode_candidate("org-xyz", BarcodeSymbology.EAN13, 1)
        code = build_generated_barcode_candidate("org-xyz", BarcodeSymbology.CODE128, 1)
        assert ean[2:6] == code[2:6]

    def test_sequence_wraps_around(self):
        """Последовательность берётся по модулю, отрицательная — тоже."""
        big = build_generated_barcode_candidate("org-1", BarcodeSymbology.EAN13, 1_000_042)
        negative = build_generated_barcode_candidate("org-1", BarcodeSymbology.EAN13, -1)

        assert big[6:12] == "000042"
        assert negative[6:12] == "999999"
        assert is_valid_ean13(negative)


class TestUniqueGeneratedBarcode:
    @pytest.mark.asyncio
    async def test_returns_first_free_candidate(self):
        async def is_taken(candidate: str) -> bool:
            return False

        value = await resolve_unique_generated_barcode(
            "org-1", BarcodeSymbology.EAN13, is_taken, start_sequence=100
        )
        assert value == build_generated_barcode_candidate("org-1", BarcodeSymbology.EAN13, 100)

    @pytest.mark.asyncio
    async def test_skips_taken_candidates(self):
        taken = {
            build_generated_barcode_candidate("org-1", BarcodeSymbology.CODE128, 100),
            build_generated_barcode_candidate("org-1", BarcodeSymbology.CODE128, 101),
        }

        async def is_taken(candidate: str) -> bool:
            return candidate in taken

        value = await resolve_unique_generated_barcode(
            "org-1", BarcodeSymbology.CODE128, is_taken, start_sequence=100
        )
        assert value == build_generated_barcode_candidate("org-1", BarcodeSymbology.CODE128, 102)

    @pytest.mark.asyncio
    async def test_exhausted_after_max_attempts(self):
        """Все кандидаты заняты — ошибка ровно после max_attempts проверок."""
        calls = []

        async def is_taken(candidate: str) -> bool:
            calls.append(candidate)
            return True

        with pytest.raises(BarcodeGenerationExhaustedError, match="BARCODE_GENERATION_EXHAUSTED"):
            await resolve_unique_generated_barcode(
                "org-1", BarcodeSymbology.EAN13, is_taken, max_attempts=5, start_sequence=0
            )

        assert len(calls) == 5
        assert len(set(calls)) == 5

    @pytest.mark.asyncio
    async def test_default_start_sequence(self):
        """Без start_sequence перебор стартует от текущего времени и даёт валидный код."""

        async def is_taken(candidate: str) -> bool:
            return False

        value = await resolve_unique_generated_barcode("org-1", BarcodeSymbology.EAN13, is_taken)
        assert is_valid_ean13(value)
