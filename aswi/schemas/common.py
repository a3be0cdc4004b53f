"""Response envelope and shared field types."""

from __future__ import annotations

from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, Field, PlainSerializer

T = TypeVar("T")

# Largest value a signed BIGINT primary key can hold
MAX_DB_ID = 2**63 - 1
# Largest head count an INTEGER column can hold
MAX_HEAD_COUNT = 2**31 - 1

# Incoming identifiers; anything outside the column range is a 400, not a driver error
DbId = Annotated[int, Field(ge=1, le=MAX_DB_ID)]

# BIGINT identifiers go out as strings so JavaScript clients keep precision
IdStr = Annotated[int, PlainSerializer(lambda v: str(v), return_type=str, when_used="json")]


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T


class CountRead(BaseModel):
    count: int


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    status: str
    db: bool
    version: str


def ok(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Build the success envelope consumed by ``ApiResponse[...]`` models."""
    return {"success": True, "message": message, "data": data}
