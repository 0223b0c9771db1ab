"""Application exceptions shared by the pipelines, services and the HTTP layer."""
from typing import Union


class AppException(Exception):
    """Base exception for application-specific errors."""

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class LineLengthError(AppException):
    """Raised when an import line does not have the fixed record length."""

    def __init__(self, actual_length: int, expected_length: int = 40):
        self.actual_length = actual_length
        super().__init__(
            message=f"line must be {expected_length} characters (got {actual_length})",
            status_code=422,
            details={"actual_length": actual_length, "expected_length": expected_length}
        )


class ValidationError(AppException):
    """Raised when data validation fails."""

    def __init__(self, message: str, errors: list = None):
        super().__init__(
            message=message,
            status_code=422,
            details={"validation_errors": errors or []}
        )


class InvalidSourceFileError(ValidationError):
    """Raised when a selected import file is not acceptable."""


class ResourceNotFoundError(AppException):
    """Raised when a referenced product, reason or entry does not exist."""

    def __init__(self, resource: str, identifier: Union[int, str]):
        super().__init__(
            message=f"{resource} with identifier '{identifier}' not found",
            status_code=404,
            details={"resource": resource, "identifier": str(identifier)}
        )


class InvalidTransitionError(AppException):
    """Raised on an illegal product lifecycle transition."""

    def __init__(self, code: str, current: str, target: str):
        super().__init__(
            message=f"product '{code}' cannot go from {current} to {target}",
            status_code=409,
            details={"code": code, "current": current, "target": target}
        )


class StorageError(AppException):
    """Raised when the record store or the file capability fails to write."""

    def __init__(self, message: str, original_error: str = None):
        super().__init__(
            message=message,
            status_code=500,
            details={"original_error": original_error}
        )


class ExportFileExistsError(StorageError):
    """Raised instead of silently overwriting an existing export file."""

    def __init__(self, file_name: str):
        super().__init__(message=f"export file '{file_name}' already exists")
        self.status_code = 409
        self.details["file_name"] = file_name


class CancelledError(AppException):
    """Early termination requested by the caller. Not a failure."""

    def __init__(self, message: str = "operation cancelled by user"):
        super().__init__(message=message, status_code=499)
