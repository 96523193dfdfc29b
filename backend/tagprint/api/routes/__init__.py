# API routes
from tagprint.api.routes import barcodes, health, price_tags, receipts

__all__ = ["barcodes", "health", "price_tags", "receipts"]
