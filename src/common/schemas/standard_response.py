# File: common/schemas/standard_response.py

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


class StandardResponse(BaseModel):
    success: bool = Field(..., description="Whether the request succeeded")
    message: str = Field(..., description="Descriptive message for response.")
    data: Optional[Any] = Field(None, description="Payload or result")
    errors: Optional[Any] = Field(None, description="Validation or error details")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def ok(message: str = "Success", data: Any = None) -> "StandardResponse":
        return StandardResponse(success=True, message=message, data=data)


class ErrorResponse(StandardResponse):
    success: bool = False

    @staticmethod
    def from_exception(message: str, errors: Optional[Any] = None) -> "ErrorResponse":
        return ErrorResponse(message=message, errors=errors)
