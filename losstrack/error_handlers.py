"""Exception handlers mapping application errors to JSON responses."""
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import AppException
from .logging_config import get_logger

logger = get_logger("error_handlers")


def _error_response(request: Request, status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, **extra, "path": request.url.path},
    )


async def app_exception_handler(request: Request, exc: AppException):
    """Pipeline and service errors carry their own status code."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(f"[API] {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _error_response(request, exc.status_code, exc.message, details=exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": " -> ".join(str(loc) for loc in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    logger.warning(f"[API] {request.method} {request.url.path} -> invalid request: {errors}")
    return _error_response(
        request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", validation_errors=errors
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Store reads are not wrapped in StorageError, so database errors can surface here."""
    conflict = isinstance(exc, IntegrityError)
    logger.error(f"[API] {request.method} {request.url.path} -> database error: {exc}", exc_info=True)
    return _error_response(
        request,
        status.HTTP_409_CONFLICT if conflict else status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Data integrity constraint violated" if conflict else "Database error occurred",
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.critical(f"[API] {request.method} {request.url.path} -> unhandled {type(exc).__name__}: {exc}",
                    exc_info=True)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
