"""API middleware: CORS, request logging, and error handling.

``ErrorHandlingMiddleware`` turns ``PromoDeskError`` subclasses (and
payloads pydantic rejects) into JSON :class:`ErrorResponse` bodies with a
status code chosen by error type:

    ValidationError       -> 422  (weekend date, missing field, immutable record)
    EntityNotFoundError   -> 404
    BackupCorruptedError  -> 400
    SubmissionError       -> 502  (intake endpoint unreachable or refused)
    SyncError             -> 502
    ConfigurationError    -> 503  (no sheets URL configured)
    anything else         -> 500

Starlette middleware is a stack (last added, first executed).  ``main.py``
adds ErrorHandling first and RequestLogging second, so the logging
middleware sees the final status code.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from promodesk.api.schemas import ErrorResponse
from promodesk.utils.errors import (
    BackupCorruptedError,
    ConfigurationError,
    EntityNotFoundError,
    PromoDeskError,
    SubmissionError,
    SyncError,
    ValidationError,
)
from promodesk.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# First match wins; subclasses before their bases.
_STATUS_BY_ERROR: tuple[tuple[type[PromoDeskError], int], ...] = (
    (ValidationError, 422),
    (EntityNotFoundError, 404),
    (BackupCorruptedError, 400),
    (SubmissionError, 502),
    (SyncError, 502),
    (ConfigurationError, 503),
)


def status_for(exc: PromoDeskError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]`` for
        development; override with specific origins in production.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch application errors and return structured JSON errors.

    Stack traces stay in the server log; the client only sees the error
    class name, the message and, for validation errors, the field.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except PromoDeskError as exc:
            status_code = status_for(exc)
            log = _logger.warning if status_code < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
                status=status_code,
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
                field=exc.field if isinstance(exc, ValidationError) else None,
            )
            return JSONResponse(status_code=status_code, content=body.model_dump())
        except PydanticValidationError as exc:
            errors = exc.errors(include_url=False)
            detail = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
            )
            _logger.warning("payload_rejected", path=str(request.url.path), errors=len(errors))
            body = ErrorResponse(error="ValidationError", detail=detail)
            return JSONResponse(status_code=422, content=body.model_dump())
