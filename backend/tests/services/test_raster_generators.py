"""Тесты генераторов растров: штрихкоды и QR."""

import io

from PIL import Image

from tagprint.models.price_tags import BarcodeRenderSpec, BarcodeSymbology
from tagprint.services.barcode_generator import (
    BarcodeGenerator,
    BarcodeRasterCache,
    RasterDegraded,
    RasterReady,
)
from tagprint.services.qr_generator import QrGenerator


class TestBarcodeGenerator:
    def test_ean13_png(self):
        result = BarcodeGenerator().generate(
            BarcodeRenderSpec(symbology=BarcodeSymbology.EAN13, text="5901234123457")
        )

        assert isinstance(result, RasterReady)
        assert result.png.startswith(b"\x89PNG")
        with Image.open(io.BytesIO(result.png)) as img:
            assert img.size == (result.width_pixels, result.height_pixels)
        assert result.width_pixels > result.height_pixels

    def test_code128_png(self):
        result = BarcodeGenerator().generate(
            BarcodeRenderSpec(symbology=BarcodeSymbology.CODE128, text="ABC-123-XYZ")
        )
        assert isinstance(result, RasterReady)

    def test_invalid_value_is_degraded(self):
        """Буквы в EAN-13 — не исключение, а явный результат."""
        result = BarcodeGenerator().generate(
            BarcodeRenderSpec(symbology=BarcodeSymbology.EAN13, text="ABCDEFGHIJKLM")
        )

        assert isinstance(result, RasterDegraded)
        assert result.reason


class TestBarcodeRasterCache:
    def test_same_key_generated_once(self):
        calls = []

        class Recorder(BarcodeGenerator):
            def generate(self, spec):
                calls.append(spec.cache_key)
                return RasterDegraded(reason="test")

        cache = BarcodeRasterCache(Recorder())
        spec = BarcodeRenderSpec(symbology=BarcodeSymbology.CODE128, text="A")

        first = cache.get(spec)
        second = cache.get(spec)

        assert first is second
        assert calls == ["CODE128:A"]
        assert len(cache) == 1


class TestQrGenerator:
    def test_qr_png(self):
        result = QrGenerator().generate("https://kkm.salyk.kg/check?fd=1")

        assert isinstance(result, RasterReady)
        assert result.width_pixels == result.height_pixels
        with Image.open(io.BytesIO(result.png)) as img:
            assert img.mode == "1"

    def test_empty_payload_degraded(self):
        assert isinstance(QrGenerator().generate("   "), RasterDegraded)
