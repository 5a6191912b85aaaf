"""
Ouderschaps API: Shared Schema Building Blocks
================================================

What:  The camelCase base model and the response envelope used by every route.
How:   `CamelModel` derives wire names from the snake_case attribute names
       (`dossier_nummer` → `dossierNummer`) and accepts both spellings on
       input. Responses are wrapped in `Envelope[T]`; errors are produced by
       the global exception handlers in the `ErrorResponse` shape.

Envelope:
    { "success": true,  "data": <payload> }      2xx
    { "success": false, "error": "<message>" }   4xx / 5xx
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(BaseModel, Generic[T]):
    """Success envelope wrapping any payload."""

    success: Literal[True] = True
    data: T


class ErrorResponse(BaseModel):
    """Error envelope; documented on routes through `responses=`."""

    success: Literal[False] = False
    error: str = Field(description="Human-readable error message")


class MessageOut(BaseModel):
    message: str


class Pagination(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool


def reject_null(v):
    """`mode="before"` field validator body for partial updates of NOT NULL columns.

    Validators do not run for omitted fields, so this only rejects an explicit
    JSON null.
    """
    if v is None:
        raise ValueError("may not be null")
    return v


def ok(data) -> Envelope:
    """Wrap a payload in the success envelope."""
    return Envelope(data=data)


# Reused by route decorators to document the error envelope.
ERROR_RESPONSES = {
    400: {"description": "Validation failed", "model": ErrorResponse},
    401: {"description": "Not authenticated", "model": ErrorResponse},
    403: {"description": "Not the owner of the dossier", "model": ErrorResponse},
    404: {"description": "Resource not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
