"""
Pydantic schemas for the category resource.
"""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from catalog.db.models.category import CategoryStatus

STATUS_MESSAGE = "Status must be either active or inactive"


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _check_status(value: Any) -> Any:
    if value is None or isinstance(value, CategoryStatus):
        return value
    if not isinstance(value, str) or value not in {status.value for status in CategoryStatus}:
        raise ValueError(STATUS_MESSAGE)
    return value


class CategoryCreate(BaseModel):
    """
    Schema for creating a new category.
    """

    name: str = Field(..., min_length=1, max_length=100, description="Category name, unique across all categories")
    parent_id: Optional[str] = Field(None, description="ID of the parent category; omit for a root category")
    status: Optional[CategoryStatus] = Field(None, description="Category status, defaults to active")

    model_config = {"extra": "forbid"}

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        v = _strip(v)
        if v == "":
            raise ValueError("Category name is required")
        return v

    @field_validator("parent_id", mode="before")
    @classmethod
    def validate_parent_id(cls, v: Any) -> Optional[str]:
        """Accept only well-formed identifiers."""
        if v is None:
            return None
        try:
            return str(UUID(str(v)))
        except ValueError:
            raise ValueError("Invalid parent ID")

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        return _check_status(v)


class CategoryUpdate(BaseModel):
    """
    Schema for updating an existing category.

    Only name and status can change; the parent link is rewired exclusively
    by deleting a parent.
    """

    name: Optional[str] = Field(None, max_length=100, description="New category name")
    status: Optional[CategoryStatus] = Field(None, description="New status; inactive cascades to descendants")

    model_config = {"extra": "forbid"}

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Any:
        v = _strip(v)
        if v == "":
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        return _check_status(v)


class CategoryResponse(BaseModel):
    """
    Schema for a single stored category.
    """

    id: str = Field(..., description="Category ID")
    name: str = Field(..., description="Category name")
    status: CategoryStatus = Field(..., description="Category status")
    parent_id: Optional[str] = Field(None, description="Parent category ID, null for roots")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {"from_attributes": True}

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def stringify_ids(cls, v: Any) -> Any:
        return None if v is None else str(v)


class CategoryTreeNode(CategoryResponse):
    """
    A category with its whole subtree nested under ``children``.
    """

    children: List["CategoryTreeNode"] = Field(default_factory=list, description="Direct children, nested")

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "0f8c6c3e-54c1-4c8f-9a51-7a3b1f0c2a10",
                    "name": "Electronics",
                    "status": "active",
                    "parent_id": None,
                    "created_at": "2024-01-01T00:00:00Z",
                    "updated_at": "2024-01-01T00:00:00Z",
                    "children": [],
                }
            ]
        },
    }


class CategoryForest(BaseModel):
    """
    Root nodes of the category forest plus the flat category count.
    """

    nodes: List[CategoryTreeNode] = Field(default_factory=list)
    total: int = Field(0, ge=0)


class CategoryDeleted(BaseModel):
    """
    Payload returned after deleting a category.
    """

    deleted_category: CategoryResponse
