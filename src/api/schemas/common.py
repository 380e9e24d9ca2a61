"""Common Pydantic schemas shared across the API."""

from pydantic import BaseModel


class FieldErrorResponse(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standardized error envelope."""

    success: bool = False
    error_code: str
    message: str
    errors: list[FieldErrorResponse] | None = None


class MessageResponse(BaseModel):
    """Envelope carrying only a message."""

    success: bool = True
    message: str
