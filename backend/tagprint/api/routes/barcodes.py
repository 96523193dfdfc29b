"""
API эндпоинты штрихкодов.

- Проверка значений перед печатью (какой символикой будет напечатано)
- Подбор свободного внутреннего штрихкода организации
"""

from fastapi import APIRouter, HTTPException, status

from tagprint.models.schemas import (
    BarcodeGenerateRequest,
    BarcodeGenerateResponse,
    BarcodeResolveItem,
    BarcodeResolveRequest,
    BarcodeResolveResponse,
)
from tagprint.services.barcodes import (
    BarcodeGenerationExhaustedError,
    normalize_barcode_value,
    resolve_barcode_render_spec,
    resolve_unique_generated_barcode,
    select_primary_barcode_value,
)

router = APIRouter(prefix="/api/v1/barcodes", tags=["Barcodes"])


@router.post("/resolve", response_model=BarcodeResolveResponse, summary="Проверка штрихкодов")
async def resolve_barcodes(payload: BarcodeResolveRequest) -> BarcodeResolveResponse:
    """
    Для каждого значения показывает, как оно будет напечатано.

    Returns:
        Основной штрихкод товара и символику каждого значения
    """
    items = []
    for value in payload.values:
        spec = resolve_barcode_render_spec(value)
        items.append(
            BarcodeResolveItem(
                value=value,
                symbology=spec.symbology if spec else None,
                text=spec.text if spec else None,
            )
        )

    return BarcodeResolveResponse(
        primary=select_primary_barcode_value(payload.values),
        items=items,
    )


@router.post("/generate", response_model=BarcodeGenerateResponse, summary="Новый штрихкод")
async def generate_barcode(payload: BarcodeGenerateRequest) -> BarcodeGenerateResponse:
    """
    Подбирает внутренний штрихкод, не совпадающий с уже занятыми.

    Занятость проверяется по списку existing из запроса.
    """
    taken = {normalize_barcode_value(value) for value in payload.existing}

    async def is_taken(candidate: str) -> bool:
        return candidate in taken

    try:
        value = await resolve_unique_generated_barcode(
            organization_id=payload.organization_id,
            mode=payload.mode,
            is_taken=is_taken,
            start_sequence=payload.start_sequence,
        )
    except BarcodeGenerationExhaustedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": str(e), "message": "Не удалось подобрать свободный штрихкод"},
        )

    return BarcodeGenerateResponse(value=value, symbology=payload.mode)
