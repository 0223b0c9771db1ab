"""
Per-reason export of pending loss entries.

Every reason with unflushed entries produces one text file of consolidated
lines. Reasons are exported independently: a failure in one is recorded and
the next reason still runs. Entries are flagged as flushed only after their
file was written.
"""
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from .codec import encode_export_line
from .config import settings
from .consolidation import consolidate
from .entries import EntryService
from .errors import AppException
from .logging_config import get_logger
from .products import ProductService
from .progress import CancelToken, ProgressCallback, notify
from .reasons import ReasonService
from .schemas import ExportedFile, ExportError, ExportResult, ReasonRecord

logger = get_logger("exporter")


def build_file_name(reason_code: str, now: datetime) -> str:
    """motivoXX_YYYYMMDD_HHMMSS.txt"""
    return f"motivo{reason_code.zfill(2)}_{now:%Y%m%d}_{now:%H%M%S}.txt"


class NothingToExportError(AppException):
    def __init__(self, reason_code: str):
        super().__init__(message=f"no valid lines to export for reason {reason_code}", status_code=422)


class ExportPipeline:
    def __init__(
        self,
        files,
        products: ProductService,
        reasons: ReasonService,
        entries: EntryService,
        max_quantity: Decimal = settings.export_max_quantity,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.files = files
        self.products = products
        self.reasons = reasons
        self.entries = entries
        self.max_quantity = max_quantity
        self.clock = clock or datetime.now

    def export_pending(
        self,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> ExportResult:
        cancel_token = cancel_token or CancelToken()
        logger.info("[EXPORT] Starting export of pending entries")

        reasons = self.reasons.get_all_reasons()
        result = ExportResult(total_reasons=len(reasons))
        if not reasons:
            logger.warning("[EXPORT] No reasons registered")
            result.errors.append(ExportError(reason="*", error="no reasons registered"))
            return result

        for index, reason in enumerate(reasons):
            if cancel_token.cancelled:
                result.cancelled = True
                logger.info(f"[EXPORT] Cancelled by user before reason {reason.code}")
                break

            notify(on_progress, status=f"Exporting reason {reason.code}...", progress=index / len(reasons),
                   processed_lines=index, total_lines=len(reasons))
            try:
                exported = self.export_reason(reason)
            except Exception as e:
                message = e.message if isinstance(e, AppException) else str(e)
                logger.error(f"[EXPORT] Reason {reason.code} failed: {message}")
                result.failed_exports += 1
                result.errors.append(ExportError(reason=reason.code, error=message))
                continue

            if exported is not None:
                result.successful_exports += 1
                result.exported_files.append(exported)
                notify(on_progress, status=f"Wrote {exported.file_name}", progress=(index + 1) / len(reasons),
                       processed_lines=index + 1, total_lines=len(reasons), current_file=exported.file_name)

        if not result.cancelled:
            notify(on_progress, status="Export completed!", progress=1.0, processed_lines=len(reasons),
                   total_lines=len(reasons), has_error=bool(result.errors))
        logger.info(
            f"[EXPORT] Done: reasons={result.total_reasons}, ok={result.successful_exports}, "
            f"failed={result.failed_exports}"
        )
        return result

    def export_reason(self, reason: ReasonRecord) -> Optional[ExportedFile]:
        """Export one reason; returns None when it has nothing pending."""
        pending = self.entries.get_pending_entries(reason.id)
        if not pending:
            logger.debug(f"[EXPORT] Nothing pending for reason {reason.code}")
            return None

        groups = consolidate(pending)
        logger.info(f"[EXPORT] Reason {reason.code}: {len(pending)} entries, {len(groups)} products")

        lines: list[str] = []
        warnings: list[str] = []
        consumed: list[int] = []
        for group in groups:
            product = self.products.get_product_by_code(group.product_code)
            if product is None:
                warnings.append(f"product {group.product_code} not found, line skipped")
                continue
            if group.quantity <= 0:
                warnings.append(f"product {group.product_code} has zero quantity, line skipped")
                continue
            if group.quantity > self.max_quantity:
                warnings.append(
                    f"product {group.product_code} quantity {group.quantity} exceeds {self.max_quantity}, line skipped"
                )
                continue
            lines.append(encode_export_line(group.product_code, group.quantity, product.unit_type))
            consumed.extend(group.entry_ids)

        for w in warnings:
            logger.warning(f"[EXPORT] Reason {reason.code}: {w}")

        if not lines:
            raise NothingToExportError(reason.code)

        file_name = build_file_name(reason.code, self.clock())
        location = self.files.write(file_name, "\n".join(lines) + "\n")
        logger.info(f"[EXPORT] File created: {location}")

        self.entries.mark_flushed(consumed)

        return ExportedFile(
            reason=reason.code,
            file_name=file_name,
            location=location,
            entries_count=len(lines),
            warnings=warnings,
        )
