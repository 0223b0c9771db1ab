from typing import Optional

from .logging_config import get_logger
from .schemas import ReasonRecord
from .store import Store, to_array

logger = get_logger("reasons")

DEFAULT_REASONS = (
    ("01", "Produto Vencido"),
    ("02", "Produto Danificado"),
    ("03", "Erro de Contagem"),
    ("04", "Roubo/Furto"),
    ("05", "Ajuste de Inventário Positivo"),
    ("06", "Ajuste de Inventário Negativo"),
    ("07", "Transferência entre Lojas"),
    ("08", "Devolução de Cliente"),
)


class ReasonService:
    """Read access to the loss reasons reference data."""

    def __init__(self, store: Store):
        self.store = store

    def get_all_reasons(self) -> list[ReasonRecord]:
        return [ReasonRecord.model_validate(r) for r in to_array(self.store.query("reasons"))]

    def get_reason_by_code(self, code: str) -> Optional[ReasonRecord]:
        rows = to_array(self.store.query("reasons", code=code.zfill(2)))
        return ReasonRecord.model_validate(rows[0]) if rows else None

    def get_reason_by_id(self, reason_id: int) -> Optional[ReasonRecord]:
        row = self.store.find("reasons", reason_id)
        return ReasonRecord.model_validate(row) if row else None

    def seed_default_reasons(self) -> int:
        """Insert the default reasons that are missing. Returns how many were added."""
        existing = {r.code for r in self.get_all_reasons()}
        added = 0
        with self.store.write():
            for code, description in DEFAULT_REASONS:
                if code in existing:
                    continue
                self.store.create("reasons", {"code": code, "description": description})
                added += 1
        if added:
            logger.info(f"[SEED] Inserted {added} default reasons")
        return added
