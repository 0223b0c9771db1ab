"""
Products API endpoints.
"""
from fastapi import APIRouter, Depends, Query

from losstrack.api.deps import get_product_service
from losstrack.products import ProductService
from losstrack.schemas import ProductRecord, ProductStatistics, SanitizationResult

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductRecord])
def list_products(
    q: str = Query("", max_length=120),
    limit: int = Query(10, ge=1, le=100),
    products: ProductService = Depends(get_product_service),
):
    """
    List active products.

    - **q**: Search by code or name (accent-insensitive); empty lists all
    - **limit**: Maximum number of results
    """
    if q.strip():
        return products.search_products(q, max_results=limit)
    return products.get_all_products()[:limit]


@router.get("/stats", response_model=ProductStatistics)
def product_statistics(products: ProductService = Depends(get_product_service)):
    return products.get_statistics()


@router.post("/sanitize", response_model=SanitizationResult)
def sanitize_products(products: ProductService = Depends(get_product_service)):
    """Recompute the unit type of every product from its name."""
    return products.sanitize_unit_types()


@router.get("/{code}", response_model=ProductRecord)
def get_product(code: str, products: ProductService = Depends(get_product_service)):
    return products.require_product(code)


@router.post("/{code}/delete", response_model=ProductRecord)
def delete_product(code: str, products: ProductService = Depends(get_product_service)):
    """Soft delete: the product leaves lookups but stays in the store."""
    return products.soft_delete(code)


@router.post("/{code}/restore", response_model=ProductRecord)
def restore_product(code: str, products: ProductService = Depends(get_product_service)):
    return products.restore(code)
