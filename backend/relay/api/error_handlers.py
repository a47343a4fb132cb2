"""Error Handlers — global exception handlers for the Relay API.

Invariants:
    - RelayError → its to_response() envelope at its http_status
    - RequestValidationError → BadInputError envelope, same shape as a per-call BAD_INPUT
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details
    - Log level follows the error's severity

Design Decisions:
    - Three-layer handler: domain (RelayError), validation (pydantic), catch-all (Exception)
    - Per-call errors never reach these handlers; they travel inside ResultEnvelopes.
      Only whole-request failures (TransportError) land here
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from relay.core.errors import BadInputError, ErrorSeverity, RelayError
from relay.core.validation import FieldViolation

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    logger.log(
        _LOG_LEVELS.get(exc.severity, logging.ERROR),
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Request parameters FastAPI itself rejected (headers, query types)."""
    violations = [
        FieldViolation(
            path=".".join(str(part) for part in e["loc"]),
            message=e["msg"],
        )
        for e in exc.errors()
    ]
    return await relay_error_handler(request, BadInputError(violations))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all — never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
