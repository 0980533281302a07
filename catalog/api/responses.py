"""
Standardized API response models.

Every endpoint answers with the same envelope: ``success`` and ``message``
always, ``data`` on success, ``error`` or ``errors`` on failure.
"""

from typing import Any, Generic, List, Optional, TypeVar

from fastapi import status
from pydantic import BaseModel, Field

# Type variable for generic response models
T = TypeVar("T")


class FieldError(BaseModel):
    """A single validation problem."""

    field: str = Field(..., description="Name of the offending field")
    message: str = Field(..., description="What is wrong with it")


class DataResponseModel(BaseModel, Generic[T]):
    """Successful response carrying data."""

    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field(..., description="Response message")
    data: T = Field(..., description="Response data")


class ListResponseModel(DataResponseModel[T], Generic[T]):
    """Successful list response with the total number of records."""

    total: int = Field(..., description="Number of records")


class ErrorResponseModel(BaseModel):
    """Failed response."""

    success: bool = Field(False, description="Always false")
    message: str = Field(..., description="What went wrong")
    error: Optional[str] = Field(None, description="Additional error details")
    errors: Optional[List[FieldError]] = Field(None, description="Per-field validation errors")


def error_content(message: str, error: Optional[str] = None, errors: Optional[List[dict]] = None) -> dict:
    """Build an error body, leaving out empty optional parts."""
    content: dict = {"success": False, "message": message}
    if error:
        content["error"] = error
    if errors is not None:
        content["errors"] = errors
    return content


# Export HTTP status codes for easier route definitions
HTTP_200_OK = status.HTTP_200_OK
HTTP_201_CREATED = status.HTTP_201_CREATED
HTTP_400_BAD_REQUEST = status.HTTP_400_BAD_REQUEST
HTTP_401_UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED
HTTP_404_NOT_FOUND = status.HTTP_404_NOT_FOUND
HTTP_409_CONFLICT = status.HTTP_409_CONFLICT
HTTP_500_INTERNAL_SERVER_ERROR = status.HTTP_500_INTERNAL_SERVER_ERROR


class Tags:
    """API route tags for documentation grouping."""

    HEALTH = "Health"
    AUTH = "Auth"
    CATEGORIES = "Categories"


default_error_responses: dict[int | str, dict[str, Any]] = {
    HTTP_400_BAD_REQUEST: {
        "model": ErrorResponseModel,
        "description": "Bad Request – Input validation failed",
    },
    HTTP_401_UNAUTHORIZED: {
        "model": ErrorResponseModel,
        "description": "Unauthorized – Invalid or missing authentication",
    },
    HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": ErrorResponseModel,
        "description": "Internal Error – Unexpected server failure",
    },
}

category_error_responses: dict[int | str, dict[str, Any]] = {
    **default_error_responses,
    HTTP_404_NOT_FOUND: {
        "model": ErrorResponseModel,
        "description": "Not Found – Category or parent category does not exist",
    },
    HTTP_409_CONFLICT: {
        "model": ErrorResponseModel,
        "description": "Conflict – Category name already in use",
    },
}
