"""Response envelopes.

Success bodies are ``{"data": ...}``, collections add ``meta``, and every
error is ``{"error": {"code", "message", "details"?}}``.
"""

from typing import Any, Generic, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Window requested and the number of items actually returned."""

    limit: int
    offset: int
    count: int


class DataResponse(BaseModel, Generic[T]):
    data: T


class ListResponse(BaseModel, Generic[T]):
    data: list[T]
    meta: PaginationMeta


class ErrorDetail(BaseModel):
    """Body of the error envelope.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message.
        details: Per-field problems; only present for validation errors.
    """

    code: str
    message: str
    details: list[dict[str, Any]] | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


def error_response(
    status_code: int,
    code: str,
    message: str,
    *,
    details: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the error envelope.

    ``details`` is omitted from the body when there are none.
    """
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details)
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )
