"""
Fixed-width product import.

Reads a text file of 40-character product records, validates every line and
upserts the products in a single store batch. Malformed lines are collected
in the result and never stop the import.
"""
import re
from typing import Optional

from .codec import decode_line
from .errors import AppException, CancelledError, LineLengthError
from .files import SourceFile, validate_source_file
from .logging_config import get_logger
from .models import ProductStatus
from .products import ProductService
from .progress import CancelToken, PipelineStatus, ProgressCallback, notify
from .schemas import ImportLineError, ImportResult
from .store import Store, to_array
from .validation import infer_unit_type, validate_record

logger = get_logger("importer")

LINE_BREAK = re.compile(r"\r\n|\n|\r")
CANCELLED_MESSAGE = "Import cancelled by user."


def split_lines(content: str) -> list[str]:
    return LINE_BREAK.split(content)


class ImportPipeline:
    def __init__(
        self,
        store: Store,
        files,
        products: Optional[ProductService] = None,
        progress_interval: int = 10,
        max_file_size: Optional[int] = None,
    ):
        self.store = store
        self.files = files
        self.products = products
        self.progress_interval = progress_interval
        self.max_file_size = max_file_size
        self.state = PipelineStatus.IDLE

    def import_products(
        self,
        source: Optional[SourceFile] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> ImportResult:
        """
        Select (unless ``source`` is given), read and import a product file.

        Always returns an ImportResult; ``status`` tells COMPLETED, CANCELLED
        and FAILED apart.
        """
        cancel_token = cancel_token or CancelToken()
        logger.info("[IMPORT] Starting product import")

        self.state = PipelineStatus.SELECTING
        notify(on_progress, status="Selecting file...", processed_lines=0, total_lines=0, current_file="")

        try:
            cancel_token.raise_if_cancelled(CANCELLED_MESSAGE)
            if source is None:
                source = self.files.pick_source_file()
            if source is None:
                return self._cancelled(ImportResult(), "No file selected.")

            if self.max_file_size is not None:
                validate_source_file(source, self.max_file_size)
            else:
                validate_source_file(source)

            # Cancel may arrive while the picker is open
            cancel_token.raise_if_cancelled(CANCELLED_MESSAGE)

            self.state = PipelineStatus.READING
            notify(on_progress, status="Reading file...", processed_lines=0, total_lines=0,
                   current_file=source.name)
            content = self.files.read_as_text(source.uri)
        except CancelledError as e:
            return self._cancelled(ImportResult(file_name=source.name if source else ""), e.message)
        except (AppException, OSError, UnicodeDecodeError) as e:
            return self._failed(ImportResult(file_name=source.name if source else ""), e, on_progress)

        return self.import_text(content, source.name, on_progress, cancel_token)

    def import_text(
        self,
        content: str,
        file_name: str = "",
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> ImportResult:
        cancel_token = cancel_token or CancelToken()
        result = ImportResult(file_name=file_name)

        lines = split_lines(content)
        total_lines = sum(1 for line in lines if line.strip())
        logger.info(f"[IMPORT] {file_name or '<text>'}: {len(lines)} lines ({total_lines} non-blank)")

        self.state = PipelineStatus.PROCESSING
        notify(on_progress, status="Processing products...", processed_lines=0,
               total_lines=total_lines, current_file=file_name)

        processed = 0
        try:
            with self.store.write():
                seen_codes: set[str] = set()
                for index, line in enumerate(lines):
                    if cancel_token.cancelled:
                        result.cancelled = True
                        logger.info(f"[IMPORT] Cancelled by user after {processed} lines")
                        break

                    if not line.strip():
                        continue

                    self._process_line(line, index + 1, seen_codes, result)
                    processed += 1

                    if processed % self.progress_interval == 0 or processed == total_lines:
                        notify(
                            on_progress,
                            status=f"Processing line {processed} of {total_lines}...",
                            progress=processed / total_lines,
                            processed_lines=processed,
                            total_lines=total_lines,
                            current_file=file_name,
                        )

                if not result.cancelled:
                    self.store.create("imports", {
                        "file_name": file_name or "<text>",
                        "items_inserted": result.inserted,
                        "items_updated": result.updated,
                        "source": "file",
                    })
        except Exception as e:
            # The store rolled the whole batch back
            logger.error(f"[IMPORT] Batch aborted at line {processed + 1}: {e}", exc_info=True)
            return self._failed(result, e, on_progress)

        self._invalidate_product_cache()

        if result.cancelled:
            return self._cancelled(result, CANCELLED_MESSAGE)

        self.state = PipelineStatus.COMPLETED
        result.status = PipelineStatus.COMPLETED
        result.message = "Import completed."
        notify(on_progress, status="Import completed!", progress=1.0, processed_lines=processed,
               total_lines=total_lines, current_file=file_name)
        logger.info(
            f"[IMPORT] Done: inserted={result.inserted}, updated={result.updated}, "
            f"errors={len(result.errors)}, total={result.total_processed}"
        )
        return result

    def _process_line(self, line: str, line_number: int, seen_codes: set, result: ImportResult) -> None:
        try:
            decoded = decode_line(line)
        except LineLengthError as e:
            result.errors.append(ImportLineError(line_number=line_number, line_content=line, reason=e.message))
            return

        check = validate_record(decoded, seen_codes)
        if not check.valid:
            result.errors.append(ImportLineError(line_number=line_number, line_content=line, reason=check.reason))
            return
        seen_codes.add(decoded.code)

        unit_type = infer_unit_type(decoded.name)
        existing = to_array(self.store.query("products", code=decoded.code, status=ProductStatus.ACTIVE))

        if existing:
            self.store.update("products", existing[0]["id"], {
                "name": decoded.name,
                "regular_price": check.price,
                "unit_type": unit_type,
            })
            result.updated += 1
            logger.debug(f"[IMPORT] Updated {decoded.code}: {decoded.name} ({unit_type.value})")
        else:
            self.store.create("products", {
                "code": decoded.code,
                "name": decoded.name,
                "regular_price": check.price,
                "club_price": 0,
                "unit_type": unit_type,
                "status": ProductStatus.ACTIVE,
            })
            result.inserted += 1
            logger.debug(f"[IMPORT] Created {decoded.code}: {decoded.name} ({unit_type.value})")

    def _invalidate_product_cache(self) -> None:
        if self.products is not None:
            self.products.clear_cache()

    def _cancelled(self, result: ImportResult, message: str) -> ImportResult:
        self.state = PipelineStatus.CANCELLED
        result.cancelled = True
        result.status = PipelineStatus.CANCELLED
        result.message = message
        return result

    def _failed(self, result: ImportResult, error: Exception, on_progress: Optional[ProgressCallback]) -> ImportResult:
        message = error.message if isinstance(error, AppException) else str(error)
        self.state = PipelineStatus.FAILED
        result.status = PipelineStatus.FAILED
        result.inserted = 0
        result.updated = 0
        result.errors = [ImportLineError(line_number=0, line_content="", reason=f"import failed: {message}")]
        result.message = f"Import failed: {message}"
        notify(on_progress, status=f"Error: {message}", progress=0.0, processed_lines=0, total_lines=0,
               current_file=result.file_name, has_error=True)
        return result
