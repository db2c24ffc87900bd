"""Application exceptions and the handlers that turn them into JSON.

Every error response has the same envelope:

    {"error": {"code": "BLAST_START_NOT_FOUND", "message": "...", "details": {...}}}

`details` is only present for request validation errors.  Services raise
the `KitchenOpsException` subclasses below; unique-constraint races from
the database are mapped to domain codes in `UNIQUE_VIOLATIONS`.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class KitchenOpsException(Exception):
    """Base exception for KitchenOps application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(self.message)


class BusinessLogicError(KitchenOpsException):
    """A log or request that breaks a compliance rule (422)."""

    def __init__(self, message: str, error_code: str = "BUSINESS_LOGIC_ERROR"):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, error_code)


class ConflictError(KitchenOpsException):
    """A write that clashes with existing state (409)."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message, status.HTTP_409_CONFLICT, error_code)


class PermissionDeniedError(KitchenOpsException):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, status.HTTP_403_FORBIDDEN, "PERMISSION_DENIED")


class TenantContextError(KitchenOpsException):
    """The session token names no active property."""

    def __init__(self, message: str = "No active property"):
        super().__init__(message, status.HTTP_403_FORBIDDEN, "TENANT_CONTEXT_REQUIRED")


# ── Unique-constraint races ──────────────────────────────────
# (markers found in the driver message, error code, user message).
# Postgres names the constraint, SQLite names the table.columns.
UNIQUE_VIOLATIONS = [
    (
        ("uq_refrigeration_unit_property_name", "refrigeration_units."),
        "UNIT_NAME_TAKEN",
        "A refrigeration unit with this name already exists.",
    ),
    (
        ("property_settings_pkey", "property_settings."),
        "SETTINGS_CONFLICT",
        "Property settings were changed by another request. Please retry.",
    ),
]


def create_error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: dict | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    content = {"error": {"code": error_code, "message": message}}
    if details:
        content["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def kitchenops_exception_handler(request: Request, exc: KitchenOpsException) -> JSONResponse:
    logger.warning(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.error_code, "path": request.url.path},
    )
    return create_error_response(exc.status_code, exc.message, exc.error_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """401s from the auth dependencies, 404/405 from routing."""
    return create_error_response(
        exc.status_code,
        str(exc.detail),
        f"HTTP_{exc.status_code}",
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Payload errors, e.g. a blank food name or an `id` on a create."""
    errors = [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"path": request.url.path, "fields": [e["field"] for e in errors]},
    )
    return create_error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        "VALIDATION_ERROR",
        details={"errors": errors},
    )


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Map a known unique violation to its domain code; anything else is a 409."""
    driver_message = str(exc.orig) if exc.orig is not None else str(exc)
    for markers, error_code, message in UNIQUE_VIOLATIONS:
        if any(marker in driver_message for marker in markers):
            break
    else:
        error_code, message = "DATA_CONFLICT", "The record conflicts with existing data."

    logger.warning(
        f"{error_code} on {request.method} {request.url.path}: {driver_message}",
        extra={"error_code": error_code, "path": request.url.path},
    )
    return create_error_response(status.HTTP_409_CONFLICT, message, error_code)


async def operational_exception_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(f"Database unavailable on {request.method} {request.url.path}: {exc}")
    return create_error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Database temporarily unavailable. Please try again.",
        "DATABASE_UNAVAILABLE",
    )


def register_exception_handlers(app):
    app.add_exception_handler(KitchenOpsException, kitchenops_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(OperationalError, operational_exception_handler)
