"""
Точка входа FastAPI приложения tagprint.

Печать ценников (A4 и рулон) и чеков POS в PDF.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tagprint.api.routes import barcodes, health, price_tags, receipts
from tagprint.config import get_settings
from tagprint.logging_config import setup_logging
from tagprint.services.fonts import ensure_font_registered

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifecycle приложения.

    Логирование и шрифт настраиваются при старте.
    """
    # Startup
    setup_logging()
    logger.info(f"[START] {settings.app_name} v{settings.app_version}")

    font_name = ensure_font_registered()
    logger.info(f"[FONT] {font_name}")

    yield

    # Shutdown
    logger.info(f"[STOP] {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
## tagprint API

Сервис печати ценников и чеков POS.

### Возможности:

* **Ценники A4** — сетки 3x8 и 2x5 со штрихкодами EAN-13 / Code128
* **Рулон XP-365B** — 58x40мм с калибровкой зазора и сдвига
* **Чеки 58мм** — предчек и фискальный чек с QR
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Подключение роутеров
app.include_router(health.router, tags=["Health"])
app.include_router(price_tags.router)
app.include_router(receipts.router)
app.include_router(barcodes.router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Корневой эндпоинт — ссылка на документацию."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
