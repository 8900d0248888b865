"""Error Handlers — global exception handlers for the directory API.

Invariants:
    - DirectoryError → structured JSON with its own status, code and message
    - RequestValidationError → 400; message is the first violation, details list all
    - Exception (catch-all) → 500 carrying only the exception's own message

Design Decisions:
    - Three-layer handler: domain (DirectoryError), validation (Pydantic), catch-all
    - Client errors log at INFO/WARNING, server errors at ERROR with the traceback
    - Handlers are plain module functions so tests can call the formatting helpers
      without an app
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from directory_api.core.errors import DirectoryError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)

# First element of a FastAPI error loc names where the value came from
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DirectoryError, handle_directory_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_directory_error(request: Request, exc: DirectoryError) -> JSONResponse:
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "account_id": exc.context.account_id,
    }
    if exc.http_status >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=exc, extra=extra)
    else:
        logger.info(f"{type(exc).__name__}: {exc.message}", extra=extra)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    errors = exc.errors()
    logger.warning(
        f"Validation error on {request.url.path}: {first_violation_message(errors)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_validation_error_response(errors),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": str(exc) or "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _field_path(loc) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


def first_violation_message(errors) -> str:
    """'field: message' for the first error, or a generic message when empty."""
    if not errors:
        return "Invalid request data"
    first = errors[0]
    field = _field_path(first.get("loc", ()))
    return f"{field}: {first['msg']}" if field else first["msg"]


def build_validation_error_response(errors) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": first_violation_message(errors),
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": _field_path(e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in errors
            ],
        },
    }
