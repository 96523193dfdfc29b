"""Тесты для API эндпоинтов /api/v1/price-tags."""

import pytest
from fastapi.testclient import TestClient

from tagprint.config import get_settings
from tagprint.main import app

client = TestClient(app)


def label(**overrides) -> dict:
    data = {"name": "Чай зелёный", "sku": "SKU-1", "barcode": "5901234123457", "price": 120}
    data.update(overrides)
    return data


class TestTemplatesEndpoint:
    def test_lists_all_templates(self):
        response = client.get("/api/v1/price-tags/templates")

        assert response.status_code == 200
        templates = {item["id"]: item for item in response.json()}
        assert set(templates) == {"3x8", "2x5", "xp365b-roll-58x40"}
        assert templates["3x8"]["per_page"] == 24
        assert templates["2x5"]["per_page"] == 10
        assert templates["xp365b-roll-58x40"]["calibration_defaults"]["gap_mm"] == 3.5
        assert templates["3x8"]["calibration_defaults"] is None


class TestPriceTagsPdfEndpoint:
    def test_grid_pdf(self):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={
                "template": "3x8",
                "labels": [label(), label(name="Хлеб", barcode="", price=None, quantity=3)],
                "store_name": "Магазин Центр",
            },
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == "inline; filename=price-tags.pdf"
        assert response.content.startswith(b"%PDF-")

    def test_roll_without_barcode_requires_confirmation(self):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={"template": "xp365b-roll-58x40", "labels": [label(barcode="  ")]},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "BARCODE_CONFIRMATION_REQUIRED"

    def test_roll_without_barcode_confirmed(self):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={
                "template": "xp365b-roll-58x40",
                "labels": [label(barcode="")],
                "allow_without_barcode": True,
                "roll_calibration": {"gap_mm": 2, "x_offset_mm": 0.5, "height_mm": 30},
            },
        )

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF-")

    def test_grid_without_barcode_needs_no_confirmation(self):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={"template": "2x5", "labels": [label(barcode="")]},
        )
        assert response.status_code == 200

    def test_calibration_out_of_range(self):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={
                "template": "xp365b-roll-58x40",
                "labels": [label()],
                "roll_calibration": {"gap_mm": 10},
            },
        )
        assert response.status_code == 422

    def test_empty_labels(self):
        response = client.post("/api/v1/price-tags/pdf", json={"template": "3x8", "labels": []})
        assert response.status_code == 422

    def test_unknown_template(self):
        response = client.post("/api/v1/price-tags/pdf", json={"template": "4x4", "labels": [label()]})
        assert response.status_code == 422

    def test_total_copies_limit(self):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={"template": "3x8", "labels": [label(quantity=100)] * 6},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "LABELS_LIMIT_EXCEEDED"

    def test_quantity_limit(self):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={"template": "3x8", "labels": [label(quantity=101)]},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "LABELS_LIMIT_EXCEEDED"

    def test_quantity_limit_follows_settings(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "max_quantity_per_item", 2)

        response = client.post(
            "/api/v1/price-tags/pdf",
            json={"template": "3x8", "labels": [label(quantity=3)]},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "LABELS_LIMIT_EXCEEDED"

    @pytest.mark.parametrize("price", [1e30, -1])
    def test_price_out_of_range(self, price):
        response = client.post(
            "/api/v1/price-tags/pdf",
            json={"template": "3x8", "labels": [label(price=price)]},
        )
        assert response.status_code == 422
