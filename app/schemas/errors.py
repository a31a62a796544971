"""Error envelopes shared by every endpoint."""
from typing import Any, List, Optional

from pydantic import BaseModel


class MessageResponse(BaseModel):
    msg: str


class ErrorResponse(BaseModel):
    error: str


class FieldError(BaseModel):
    """One rejected field, in the shape the frontend already consumes."""

    type: str = "field"
    value: Optional[Any] = None
    msg: str
    path: str
    location: str


class ValidationErrorResponse(BaseModel):
    errors: List[FieldError]
