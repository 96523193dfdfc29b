"""
API эндпоинт печати чека POS (лента 58мм).
"""

import logging
import re

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from tagprint.models.schemas import ReceiptPdfRequest
from tagprint.services.error_messages import get_friendly_error
from tagprint.services.receipt_pdf import ReceiptPdfGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/receipts", tags=["Receipts"])


@router.post(
    "/pdf",
    response_class=Response,
    summary="PDF чека",
    description="""
Генерация PDF чека для термопринтера 58мм.

**Варианты:**
- `PRECHECK` — предчек с плашкой «не является фискальным документом»
- `FISCAL` — фискальный чек с реквизитами ККМ и QR
    """,
)
async def receipt_pdf(payload: ReceiptPdfRequest) -> Response:
    """Генерация PDF чека по данным продажи."""
    job = payload.job.to_domain()

    try:
        pdf_bytes = ReceiptPdfGenerator().generate(job, payload.labels.to_domain())
    except Exception:
        logger.exception(f"Ошибка генерации чека {job.number}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_friendly_error("render_failed").to_dict(),
        )

    # Заголовок ответа допускает только latin-1
    safe_number = re.sub(r"[^A-Za-z0-9._-]", "_", job.number)
    filename = f"pos-receipt-{safe_number}-{job.variant.value.lower()}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename={filename}"},
    )
