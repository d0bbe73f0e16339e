"""
Response envelope shared by every endpoint.

Success and failure both use `{statusCode, data, message, success}`;
failures additionally carry `errors`.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Success envelope."""

    statusCode: int = Field(default=200, description="HTTP status mirrored in the body")
    data: Any = Field(default=None, description="Response payload")
    message: str = Field(default="Success", description="Human readable outcome")
    success: bool = Field(default=True)


class ErrorResponse(BaseModel):
    """Failure envelope."""

    statusCode: int
    data: Optional[Any] = None
    message: str
    success: bool = False
    errors: list[Any] = Field(default_factory=list)


def ok(data: Any = None, message: str = "Success", status_code: int = 200) -> ApiResponse:
    """Build a success envelope."""
    return ApiResponse(
        statusCode=status_code,
        data=data if data is not None else {},
        message=message,
        success=status_code < 400,
    )


def failure(status_code: int, message: str, errors: Optional[list[Any]] = None) -> ErrorResponse:
    """Build a failure envelope."""
    return ErrorResponse(
        statusCode=status_code,
        message=message,
        errors=errors or [],
    )
