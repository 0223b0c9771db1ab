"""
Progress and cancellation contract shared by the import and export pipelines.

Both pipelines run in the caller's thread. Progress callbacks are invoked
synchronously from the processing loop and the cancel token is polled
between iterations, never in the middle of a line.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
from pydantic import BaseModel, Field

from .errors import CancelledError


class PipelineStatus(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    READING = "reading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ProgressUpdate(BaseModel):
    status: str
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    processed_lines: Optional[int] = None
    total_lines: Optional[int] = None
    current_file: Optional[str] = None
    has_error: bool = False


ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class CancelToken:
    """Mutable flag a caller flips to ask a running pipeline to stop."""
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def raise_if_cancelled(self, message: str = "operation cancelled by user") -> None:
        if self.cancelled:
            raise CancelledError(message)


def notify(on_progress: Optional[ProgressCallback], **fields) -> None:
    if on_progress is not None:
        on_progress(ProgressUpdate(**fields))
