"""Тесты извлечения фискальных реквизитов из ответа ККМ."""

import pytest

from tagprint.models.receipt import FiscalModeStatus
from tagprint.services.fiscal_metadata import (
    FiscalReceiptResult,
    extract_fiscal_metadata,
    parse_fiscal_mode_status,
    resolve_fiscal_metadata,
)


class TestExtractFiscalMetadata:
    def test_camel_case_fields(self):
        payload = {
            "kkmFactoryNumber": " KKM-0001 ",
            "kkmRegistrationNumber": "0000000001",
            "fiscalModeStatus": "sent",
            "fnNumber": "FN-9",
            "qrCode": "https://kkm.salyk.kg/check?fd=1",
        }

        meta = extract_fiscal_metadata(payload)

        assert meta.kkm_factory_number == "KKM-0001"
        assert meta.kkm_registration_number == "0000000001"
        assert meta.fiscal_mode_status == FiscalModeStatus.SENT
        assert meta.upfd_or_fiscal_memory == "FN-9"
        assert meta.qr_payload == "https://kkm.salyk.kg/check?fd=1"

    def test_snake_case_and_order(self):
        """Первый непустой ключ из списка выигрывает."""
        payload = {
            "kkm_factory_number": "",
            "factoryNumber": "F-2",
            "serialNumber": "S-3",
            "kkm_registration_number": 12345,
        }

        meta = extract_fiscal_metadata(payload)

        assert meta.kkm_factory_number == "F-2"
        assert meta.kkm_registration_number == "12345"

    def test_boolean_status(self):
        assert extract_fiscal_metadata({"sentToOFD": True}).fiscal_mode_status == FiscalModeStatus.SENT
        assert (
            extract_fiscal_metadata({"sentToGNS": False}).fiscal_mode_status
            == FiscalModeStatus.NOT_SENT
        )

    def test_not_a_dict(self):
        meta = extract_fiscal_metadata(["kkmFactoryNumber", "1"])

        assert meta.kkm_factory_number is None
        assert meta.fiscal_mode_status is None

    def test_none(self):
        assert extract_fiscal_metadata(None).qr_payload is None


class TestParseStatus:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("SENT", FiscalModeStatus.SENT),
            ("success", FiscalModeStatus.SENT),
            (" ok ", FiscalModeStatus.SENT),
            ("ERROR", FiscalModeStatus.FAILED),
            ("failed", FiscalModeStatus.FAILED),
            ("pending", FiscalModeStatus.NOT_SENT),
            ("QUEUED", FiscalModeStatus.NOT_SENT),
            ("unknown", None),
            ("", None),
            (1, None),
            (None, None),
        ],
    )
    def test_aliases(self, value, expected):
        assert parse_fiscal_mode_status(value) == expected


class TestResolveFiscalMetadata:
    def test_explicit_fields_win(self):
        result = FiscalReceiptResult(
            raw_json={"kkmFactoryNumber": "RAW", "qr": "raw-qr", "ofdStatus": "ERROR"},
            kkm_factory_number="EXPLICIT",
            fiscal_mode_status=FiscalModeStatus.SENT,
        )

        meta = resolve_fiscal_metadata(result, fallback_status=FiscalModeStatus.NOT_SENT)

        assert meta.kkm_factory_number == "EXPLICIT"
        assert meta.qr_payload == "raw-qr"
        assert meta.fiscal_mode_status == FiscalModeStatus.SENT

    def test_raw_status_before_fallback(self):
        result = FiscalReceiptResult(raw_json={"gnsStatus": "error"})

        meta = resolve_fiscal_metadata(result, fallback_status=FiscalModeStatus.SENT)

        assert meta.fiscal_mode_status == FiscalModeStatus.FAILED

    def test_fallback_status(self):
        meta = resolve_fiscal_metadata(FiscalReceiptResult(), fallback_status=FiscalModeStatus.NOT_SENT)

        assert meta.fiscal_mode_status == FiscalModeStatus.NOT_SENT
        assert meta.kkm_registration_number is None
