"""
==============================================================================
Common Schemas Module
==============================================================================

Shared response schemas used across all API endpoints.

ServiceResponse is also the wire format of the barcode store:
    {success, message?, errorCode?, errors?, data}

==============================================================================
"""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class SuccessResponse(BaseModel):
    """Standard success response wrapper."""
    success: bool = Field(default=True)
    data: Optional[Any] = Field(default=None)


class MessageResponse(BaseModel):
    """Simple message response."""
    success: bool = Field(default=True)
    message: str


class ServiceResponse(BaseModel, Generic[T]):
    """Outcome envelope returned by store operations."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None)
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    errors: List[str] = Field(default_factory=list)
    data: Optional[T] = Field(default=None)

    @classmethod
    def ok(cls, data: Optional[T] = None, message: Optional[str] = None) -> "ServiceResponse[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(
        cls,
        message: str,
        error_code: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ) -> "ServiceResponse[T]":
        return cls(success=False, message=message, error_code=error_code, errors=errors or [])
