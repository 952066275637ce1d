"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Envelope for request-validation (422) and unexpected (500) errors."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class NotFoundResponse(BaseModel):
    """404 body for an unknown resource id."""
    error: str = Field(examples=["Bird not found"])


class UnprocessableEntityResponse(BaseModel):
    """
    422 body for a rejected write.

    `errors` is either attribute → messages or a flat list of full
    messages, depending on the deployment's ERROR_FORMAT.
    """
    errors: Union[dict[str, list[str]], list[str]] = Field(
        examples=[{"name": ["can't be blank"]}, ["Name can't be blank"]]
    )
