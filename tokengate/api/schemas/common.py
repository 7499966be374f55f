"""
Common Pydantic schemas for API responses.
Every endpoint answers with the same envelope: success flag, then either
data or an error message.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class APIResponse(BaseModel):
    """Base API response envelope."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True


class RequestBody(BaseModel):
    """Request body whose string fields treat JSON null as empty."""
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class SuccessResponse(APIResponse):
    """Success response model."""
    data: Optional[Any] = None


class ErrorResponse(APIResponse):
    """Error response model."""
    success: bool = False
    error: str


class HealthData(BaseModel):
    status: str = "ok"
    service: str = "QXB API"
    database: str = "ok"


class HealthCheckResponse(SuccessResponse):
    data: HealthData


def create_success_response(data: Any = None) -> SuccessResponse:
    """Create a success response."""
    return SuccessResponse(data=data)


def create_error_response(message: str) -> ErrorResponse:
    """Create an error response."""
    return ErrorResponse(error=message)
