"""FastAPI exception handlers for domain errors.

Translates domain errors to HTTP responses. Every body follows ErrorResponse:
``{"detail": ..., "code": ..., "errors": [...]?}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from retail_credit.domain.errors import (
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from retail_credit.entrypoints.http.error_responses import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order; specific error codes (INVALID_TERM, CREDIT_NOT_FOUND, ...)
# inherit the status of their family.
STATUS_BY_ERROR_FAMILY: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 422),  # HTTP_422_UNPROCESSABLE_CONTENT
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_code_for(exc: DomainError) -> int:
    for family, status_code in STATUS_BY_ERROR_FAMILY:
        if isinstance(exc, family):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _request_fields(request: Request) -> dict[str, Any]:
    return {"path": request.url.path, "method": request.method}


def _error_body(
    detail: str, code: str, errors: list[dict[str, str]] | None = None
) -> dict[str, Any]:
    response = ErrorResponse(
        detail=detail,
        code=code,
        errors=[ErrorDetail(**e) for e in errors] if errors else None,
    )
    return response.model_dump(exclude_none=True)


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Handle all domain errors with automatic HTTP status code mapping.

    Maps domain error families to HTTP status codes:
    - ValidationError (INVALID_AMOUNT, INVALID_TERM, INSUFFICIENT_AMOUNT) → 422
    - NotFoundError (CREDIT_NOT_FOUND, INSTALLMENT_NOT_FOUND, ...) → 404
    - ConflictError (DUPLICATE_ACTIVE_CREDIT, INSTALLMENT_ALREADY_PAID, ...) → 409
    - InternalError (STORAGE_FAILURE) → 500
    - Other → 400 Bad Request

    Server-side failures are logged at ERROR with the error context; rejected
    requests are logged at INFO.
    """
    status_code = status_code_for(exc)
    log_fields = {
        "error_code": exc.error_code,
        "error_message": exc.message,
        **_request_fields(request),
    }

    if status_code >= 500:
        logger.error("Domain error occurred", extra={**log_fields, "context": exc.context})
    else:
        logger.info("Request rejected", extra=log_fields)

    body = _error_body(exc.message, exc.error_code, getattr(exc, "errors", None))
    return JSONResponse(status_code=status_code, content=body)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI/Pydantic validation errors.

    Examples:
        - amount_tendered="abc" (does not match the money pattern)
        - as_of=yesterday (not a date)
        - Missing required field
    """
    errors = [
        {
            # Location prefixes are noise for clients: "body.total" -> "total"
            "field": ".".join(
                str(loc) for loc in error["loc"] if loc not in ("body", "query", "path")
            ),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]

    logger.info(
        "Request validation error",
        extra={"errors": errors, **_request_fields(request)},
    )

    return JSONResponse(
        status_code=422,  # HTTP_422_UNPROCESSABLE_CONTENT
        content=_error_body("Invalid request parameters", "VALIDATION_ERROR", errors),
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Handle ValueError from mappers or conversions (e.g., Decimal parsing)."""
    logger.info("Value error", extra={"error_message": str(exc), **_request_fields(request)})

    return JSONResponse(
        status_code=422,  # HTTP_422_UNPROCESSABLE_CONTENT
        content=_error_body(str(exc), "INVALID_VALUE"),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors.

    These indicate bugs or infrastructure issues, so the traceback is logged
    and the client only sees a generic message.
    """
    logger.error(
        "Unexpected error occurred",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_message": str(exc),
            **_request_fields(request),
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app. Called once by build_app()."""
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, handle_value_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.debug("Exception handlers registered")
