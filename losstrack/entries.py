from decimal import Decimal
from typing import Iterable, Optional

from .codec import format_product_code
from .errors import ResourceNotFoundError, ValidationError
from .logging_config import get_logger
from .models import UnitType
from .products import ProductService
from .reasons import ReasonService
from .schemas import EntryRecord
from .store import Store, to_array

logger = get_logger("entries")


class EntryService:
    """Records loss entries and tracks which ones were already exported."""

    def __init__(self, store: Store, products: ProductService, reasons: ReasonService):
        self.store = store
        self.products = products
        self.reasons = reasons

    def record_entry(
        self,
        product_code: str,
        reason_id: int,
        quantity: Decimal,
        unit_type: Optional[UnitType] = None,
    ) -> EntryRecord:
        quantity = Decimal(str(quantity))
        if quantity < 0:
            raise ValidationError("quantity must not be negative")

        product = self.products.require_product(product_code)
        if self.reasons.get_reason_by_id(reason_id) is None:
            raise ResourceNotFoundError("Reason", reason_id)

        with self.store.write():
            row = self.store.create("entries", {
                "product_code": product.code,
                "product_name": product.name,
                "quantity": quantity,
                "reason_id": reason_id,
                "flushed": False,
                "chosen_unit_type": unit_type,
            })
        logger.info(f"[ENTRY] Recorded {quantity} of {product.code} for reason_id={reason_id}")
        return EntryRecord.model_validate(row)

    def get_all_entries(self) -> list[EntryRecord]:
        return [EntryRecord.model_validate(r) for r in to_array(self.store.query("entries"))]

    def get_pending_entries(self, reason_id: Optional[int] = None) -> list[EntryRecord]:
        filters = {"flushed": False}
        if reason_id is not None:
            filters["reason_id"] = reason_id
        return [EntryRecord.model_validate(r) for r in to_array(self.store.query("entries", **filters))]

    def get_entries_for_product(self, product_code: str) -> list[EntryRecord]:
        rows = to_array(self.store.query("entries", product_code=format_product_code(product_code)))
        return [EntryRecord.model_validate(r) for r in rows]

    def mark_flushed(self, entry_ids: Iterable[int]) -> int:
        """Flag entries as exported, all in one batch."""
        count = 0
        with self.store.write():
            for entry_id in entry_ids:
                self.store.update("entries", entry_id, {"flushed": True})
                count += 1
        return count
