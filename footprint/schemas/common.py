"""
Error envelope shared by every endpoint.

    {"code": "UNSUPPORTED_UNIT", "message": "...", "details": {...}}

VALIDATION_ERROR responses carry `details.errors`, a list of FieldError.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class FieldError(BaseModel):
    """One request-validation failure, located by dotted field path."""
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None
