"""
Custom exception hierarchy for the footprint service.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from footprint.schemas.common import FieldError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class FootprintException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UnsupportedUnitError(FootprintException):
    """No conversion factor exists for the requested unit pair."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "UNSUPPORTED_UNIT"

    def __init__(self, category: str, from_unit: str, to_unit: str | None = None):
        target = f" to {to_unit}" if to_unit else ""
        super().__init__(
            message=f"No conversion from {from_unit}{target} for category {category}.",
            details={"category": category, "from_unit": from_unit, "to_unit": to_unit},
        )


class InvalidInputError(FootprintException):
    """A required field is missing, non-numeric, or out of range."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_INPUT"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )


class StoreError(FootprintException):
    """The record store failed (connection, constraint, ...)."""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_ERROR"


class NotFoundError(StoreError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class HouseholdNotFoundError(NotFoundError):
    code = "HOUSEHOLD_NOT_FOUND"

    def __init__(self, household_id: int):
        super().__init__(
            message=f"Household {household_id} does not exist.",
            details={"household_id": household_id},
        )


class EventNotFoundError(NotFoundError):
    code = "EVENT_NOT_FOUND"

    def __init__(self, category: str, event_id: int):
        super().__init__(
            message=f"No {category} event with id {event_id} for this household.",
            details={"category": category, "event_id": event_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def footprint_exception_handler(
    request: Request, exc: FootprintException
) -> JSONResponse:
    if isinstance(exc, StoreError) and not isinstance(exc, NotFoundError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = [
        FieldError(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump()
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
