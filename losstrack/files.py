"""
Local file capability: source file selection/reading for imports and
collision-safe writes for exports.
"""
import mimetypes
import uuid
from pathlib import Path
from typing import Callable, Optional
from pydantic import BaseModel

from .config import settings
from .errors import ExportFileExistsError, InvalidSourceFileError, StorageError
from .logging_config import get_logger

logger = get_logger("files")

SUPPORTED_MIME_TYPES = ("text/plain", "text/txt")
UPLOAD_CHUNK_SIZE = 64 * 1024


class SourceFile(BaseModel):
    uri: str
    name: str
    size: Optional[int] = None
    mime_type: Optional[str] = None


def describe_file(path) -> SourceFile:
    p = Path(path)
    mime_type, _ = mimetypes.guess_type(p.name)
    return SourceFile(uri=str(p), name=p.name, size=p.stat().st_size, mime_type=mime_type)


def _too_large(max_size: int) -> InvalidSourceFileError:
    return InvalidSourceFileError(f"file too large, maximum size is {max_size // (1024 * 1024)}MB")


def validate_source_file(source: SourceFile, max_size: int = settings.import_max_file_size) -> None:
    """Raise InvalidSourceFileError when the file cannot be imported."""
    if not source.uri:
        raise InvalidSourceFileError("source file has no URI")

    if source.mime_type not in SUPPORTED_MIME_TYPES and not source.name.lower().endswith(".txt"):
        raise InvalidSourceFileError("unsupported file format, only .txt files are accepted")

    if source.size and source.size > max_size:
        raise _too_large(max_size)


class LocalFileStorage:
    """
    File capability rooted at a local directory.

    ``picker`` stands in for the interactive file chooser; it returns the
    path of the selected file or None when the user backs out.
    """

    def __init__(self, base_dir, picker: Optional[Callable[[], Optional[str]]] = None):
        self.base_dir = Path(base_dir)
        self.picker = picker

    def pick_source_file(self) -> Optional[SourceFile]:
        if self.picker is None:
            return None
        path = self.picker()
        if not path:
            logger.info("[FILES] File selection cancelled")
            return None
        source = describe_file(path)
        logger.info(f"[FILES] Selected file: {source.name}")
        return source

    def read_as_text(self, uri: str) -> str:
        # utf-8-sig strips a leading BOM
        with open(uri, "r", encoding="utf-8-sig", newline="") as f:
            return f.read()

    def write(self, file_name: str, content: str) -> str:
        """Create ``file_name`` under the base directory; never overwrites."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        out = self.base_dir / file_name
        try:
            with open(out, "x", encoding="utf-8", newline="\n") as f:
                f.write(content)
        except FileExistsError:
            logger.error(f"[FILES] Refusing to overwrite {out}")
            raise ExportFileExistsError(file_name) from None
        except OSError as e:
            raise StorageError(f"could not write {file_name}", str(e)) from e
        return str(out)

    def save_upload(self, file_obj, filename_hint: str = "import", max_size: Optional[int] = None) -> SourceFile:
        """
        Persist an uploaded file and describe it as an import source.

        With ``max_size`` set, a declared size over the limit is rejected
        before anything is written, and the copy stops as soon as the
        limit is passed.
        """
        declared = getattr(file_obj, "size", None)
        if max_size is not None and declared is not None and declared > max_size:
            raise _too_large(max_size)

        self.base_dir.mkdir(parents=True, exist_ok=True)
        original = getattr(file_obj, "filename", None) or f"{filename_hint}.txt"
        ext = Path(original).suffix or ".txt"
        out = self.base_dir / f"{filename_hint}_{uuid.uuid4().hex}{ext}"
        written = 0
        try:
            with open(out, "wb") as f:
                while True:
                    chunk = file_obj.file.read(UPLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_size is not None and written > max_size:
                        raise _too_large(max_size)
                    f.write(chunk)
        except InvalidSourceFileError:
            out.unlink(missing_ok=True)
            logger.warning(f"[FILES] Upload {original} rejected after {written} bytes")
            raise
        source = describe_file(out)
        content_type = getattr(file_obj, "content_type", None)
        return source.model_copy(update={"name": original, "mime_type": content_type or source.mime_type})
