"""Pydantic models for error handling.

Data structures for error payloads on every transport.
"""

from typing import Any, Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Schema for error details."""

    model_config = ConfigDict(extra="allow")

    field: str | None = None
    value: Any | None = None
    expected: Any | None = None
    constraint: str | None = None
    resource_id: str | int | None = None
    resource_type: str | None = None
    errors: list[dict[str, Any]] | None = None
    retry_after: int | None = None


class ErrorResponse(BaseModel):
    """Unified error envelope shared by all transports."""

    status: int = Field(..., description="HTTP-style status code")
    code: str = Field(..., description="HTTP reason phrase for the status")
    type: str = Field(..., description="Error category (SNAKE_CASE)")
    name: str = Field(..., description="Error identifier (SNAKE_CASE)")
    message: str = Field(..., description="Human-readable error description")
    data: dict[str, Any] | None = Field(default=None)
    trace_id: str = Field(default="", description="Request correlation ID")


class EventAck(TypedDict):
    """Acknowledgement returned to a socket event caller on failure."""

    error: dict[str, Any]


class StreamErrorItem(TypedDict):
    """Terminal item of a server-sent event stream."""

    type: Literal["error"]
    data: dict[str, Any]
