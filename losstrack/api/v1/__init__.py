"""API v1 Router."""
from fastapi import APIRouter

from losstrack.api.v1 import entries, exports, imports, products, reasons

api_router = APIRouter(prefix="/api/v1")

# Include all route modules
api_router.include_router(products.router)
api_router.include_router(reasons.router)
api_router.include_router(entries.router)
api_router.include_router(imports.router)
api_router.include_router(exports.router)

__all__ = ["api_router"]
