"""
Product lookup service with a short-lived read-through cache, lifecycle
transitions (soft delete / restore) and reporting helpers.
"""
import time
import unicodedata
from datetime import datetime
from typing import Callable, Optional

import pandas as pd

from .codec import format_product_code
from .config import settings
from .errors import InvalidTransitionError, ResourceNotFoundError
from .logging_config import get_logger
from .models import ProductStatus, utcnow
from .schemas import PriceRange, ProductRecord, ProductStatistics, SanitizationResult
from .store import Store, to_array
from .validation import infer_unit_type

logger = get_logger("products")


def normalize_text(s: str) -> str:
    """Lower-case and strip accents for search."""
    if not s:
        return ""
    decomposed = unicodedata.normalize("NFD", s.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class ProductService:
    MAX_CACHE_ENTRIES = 100

    def __init__(
        self,
        store: Store,
        cache_ttl_seconds: int = settings.product_cache_ttl_seconds,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.cache_ttl_seconds = cache_ttl_seconds
        self.clock = clock
        self._cache: dict[str, tuple[float, object]] = {}

    # Cache

    def _cached(self, key: str):
        hit = self._cache.get(key)
        if hit is None:
            return None
        stamp, data = hit
        if self.clock() - stamp >= self.cache_ttl_seconds:
            del self._cache[key]
            return None
        return data

    def _remember(self, key: str, data) -> None:
        self._cache[key] = (self.clock(), data)
        if len(self._cache) > self.MAX_CACHE_ENTRIES:
            oldest = next(iter(self._cache))
            del self._cache[oldest]

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("[PRODUCTS] Cache cleared")

    # Lookups

    def get_all_products(self, use_cache: bool = True) -> list[ProductRecord]:
        if use_cache:
            cached = self._cached("all_products")
            if cached is not None:
                return cached

        rows = to_array(self.store.query("products", status=ProductStatus.ACTIVE))
        products = [ProductRecord.model_validate(r) for r in rows]
        if use_cache:
            self._remember("all_products", products)
        logger.debug(f"[PRODUCTS] Loaded {len(products)} products from store")
        return products

    def get_product_by_code(self, code: str, use_cache: bool = True) -> Optional[ProductRecord]:
        """Return the active product with this code, or None."""
        if not code:
            return None
        code = format_product_code(code)
        key = f"product_{code}"
        if use_cache:
            cached = self._cached(key)
            if cached is not None:
                return cached

        rows = to_array(self.store.query("products", code=code, status=ProductStatus.ACTIVE))
        if not rows:
            return None
        product = ProductRecord.model_validate(rows[0])
        if use_cache:
            self._remember(key, product)
        return product

    def require_product(self, code: str, use_cache: bool = True) -> ProductRecord:
        product = self.get_product_by_code(code, use_cache=use_cache)
        if product is None:
            raise ResourceNotFoundError("Product", code)
        return product

    def search_products(self, term: str, max_results: int = 10) -> list[ProductRecord]:
        if not term or not term.strip():
            return []
        needle = normalize_text(term.strip())
        matches = [
            p for p in self.get_all_products()
            if needle in normalize_text(p.code) or needle in normalize_text(p.name)
        ]
        return matches[:max_results]

    # Lifecycle

    def soft_delete(self, code: str) -> ProductRecord:
        code = format_product_code(code)
        product = self.get_product_by_code(code, use_cache=False)
        if product is None:
            if to_array(self.store.query("products", code=code, status=ProductStatus.DELETED)):
                raise InvalidTransitionError(code, ProductStatus.DELETED.value, ProductStatus.DELETED.value)
            raise ResourceNotFoundError("Product", code)
        with self.store.write():
            row = self.store.update("products", product.id, {
                "status": ProductStatus.DELETED,
                "deleted_at": utcnow(),
            })
        self.clear_cache()
        logger.info(f"[PRODUCTS] Soft-deleted {product.code}")
        return ProductRecord.model_validate(row)

    def restore(self, code: str) -> ProductRecord:
        code = format_product_code(code)
        if self.get_product_by_code(code, use_cache=False) is not None:
            raise InvalidTransitionError(code, ProductStatus.ACTIVE.value, ProductStatus.ACTIVE.value)
        deleted = to_array(self.store.query("products", code=code, status=ProductStatus.DELETED))
        if not deleted:
            raise ResourceNotFoundError("Product", code)
        # Most recently deleted record wins
        target = max(deleted, key=lambda r: (r["deleted_at"] or datetime.min, r["id"]))
        with self.store.write():
            row = self.store.update("products", target["id"], {
                "status": ProductStatus.ACTIVE,
                "restored_at": utcnow(),
            })
        self.clear_cache()
        logger.info(f"[PRODUCTS] Restored {code}")
        return ProductRecord.model_validate(row)

    # Maintenance / reporting

    def sanitize_unit_types(self) -> SanitizationResult:
        """Re-derive unit_type from the name of every active product."""
        result = SanitizationResult()
        products = self.get_all_products(use_cache=False)
        result.total = len(products)

        with self.store.write():
            for product in products:
                expected = infer_unit_type(product.name)
                if product.unit_type == expected:
                    continue
                self.store.update("products", product.id, {"unit_type": expected})
                result.corrected += 1
                logger.info(f"[PRODUCTS] Corrected {product.code}: {product.name} -> {expected.value}")

        self.clear_cache()
        logger.info(f"[PRODUCTS] Sanitization done: total={result.total}, corrected={result.corrected}")
        return result

    def get_statistics(self) -> ProductStatistics:
        products = self.get_all_products()
        if not products:
            return ProductStatistics(total=0, by_unit_type={}, price_range=PriceRange(), last_updated=datetime.now())

        df = pd.DataFrame([
            {"unit_type": p.unit_type.value, "price": float(p.regular_price)} for p in products
        ])
        by_unit = df.groupby("unit_type").size().to_dict()
        prices = df.loc[df["price"] > 0, "price"]
        price_range = PriceRange(
            min=float(prices.min()),
            max=float(prices.max()),
            average=round(float(prices.mean()), 2),
        ) if not prices.empty else PriceRange()

        return ProductStatistics(
            total=len(df),
            by_unit_type={k: int(v) for k, v in by_unit.items()},
            price_range=price_range,
            last_updated=datetime.now(),
        )
