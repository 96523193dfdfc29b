"""
API эндпоинты печати ценников.

Шаблоны 3x8 и 2x5 (A4) и рулон XP-365B 58x40.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from tagprint.config import PRINT, get_settings
from tagprint.models.price_tags import PriceTagTemplate
from tagprint.models.schemas import (
    PriceTagsPdfRequest,
    PriceTagTemplateInfo,
    RollCalibrationIn,
)
from tagprint.services.barcodes import normalize_barcode_value
from tagprint.services.error_messages import (
    get_friendly_error,
    labels_limit_error,
)
from tagprint.services.price_tags_layout import TEMPLATE_CONFIGS
from tagprint.services.price_tags_pdf import PriceTagsPdfGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/price-tags", tags=["Price tags"])


@router.get(
    "/templates",
    response_model=list[PriceTagTemplateInfo],
    summary="Шаблоны ценников",
)
async def list_templates() -> list[PriceTagTemplateInfo]:
    """Список шаблонов с размерами сетки и калибровкой рулона по умолчанию."""
    result = []
    for template, config in TEMPLATE_CONFIGS.items():
        if template.is_roll:
            width_mm, height_mm = PRINT.ROLL_WIDTH_MM, PRINT.ROLL_HEIGHT_MM
        else:
            width_mm = round(PRINT.points_to_mm(PRINT.A4_WIDTH), 1)
            height_mm = round(PRINT.points_to_mm(PRINT.A4_HEIGHT), 1)

        result.append(
            PriceTagTemplateInfo(
                id=template,
                is_roll=template.is_roll,
                cols=config.cols,
                rows=config.rows,
                per_page=config.cols * config.rows,
                page_width_mm=width_mm,
                page_height_mm=height_mm,
                calibration_defaults=RollCalibrationIn() if template.is_roll else None,
            )
        )
    return result


@router.post(
    "/pdf",
    response_class=Response,
    summary="PDF ценников",
    description="""
Генерация PDF с ценниками.

**Шаблоны:**
- `3x8` — 24 ценника на листе A4
- `2x5` — 10 ценников на листе A4
- `xp365b-roll-58x40` — рулон, один ценник на страницу

Для рулона товары без штрихкода печатаются только с подтверждением
(`allow_without_barcode`).
    """,
)
async def price_tags_pdf(payload: PriceTagsPdfRequest) -> Response:
    """
    Генерация PDF ценников.

    Workflow:
    1. Проверка лимитов
    2. Проверка штрихкодов для рулона
    3. Генерация PDF через ReportLab
    """
    settings = get_settings()

    max_quantity = max(label.quantity for label in payload.labels)
    if max_quantity > settings.max_quantity_per_item:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=labels_limit_error(max_quantity, settings.max_quantity_per_item).to_dict(),
        )

    total = payload.total_copies
    if total > settings.max_labels_per_request:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=labels_limit_error(total, settings.max_labels_per_request).to_dict(),
        )

    if payload.template == PriceTagTemplate.ROLL_58x40 and not payload.allow_without_barcode:
        missing = [
            label.name for label in payload.labels if not normalize_barcode_value(label.barcode)
        ]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=get_friendly_error(
                    "barcode_confirmation_required", names=", ".join(missing[:3])
                ).to_dict(),
            )

    calibration = payload.roll_calibration.to_domain() if payload.roll_calibration else None

    try:
        pdf_bytes = PriceTagsPdfGenerator().generate(
            labels=payload.expanded_labels(),
            template=payload.template,
            locale=payload.locale,
            store_name=payload.store_name,
            no_price_label=payload.no_price_label,
            no_barcode_label=payload.no_barcode_label,
            sku_label=payload.sku_label,
            roll_calibration=calibration,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "INVALID_INPUT", "message": str(e)},
        )
    except Exception:
        logger.exception(f"Ошибка генерации ценников: шаблон {payload.template.value}, {total} шт.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_friendly_error("render_failed").to_dict(),
        )

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "inline; filename=price-tags.pdf"},
    )
