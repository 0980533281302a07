"""
Category endpoints.

Every route requires an authenticated user; the business rules live in
``CategoryService``.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, status

from catalog.api.dependencies import get_category_service, get_current_active_user
from catalog.api.responses import (
    DataResponseModel,
    ListResponseModel,
    category_error_responses,
)
from catalog.schemas.categories import (
    CategoryCreate,
    CategoryDeleted,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
)
from catalog.services.categories import CategoryService

router = APIRouter(dependencies=[Depends(get_current_active_user)])


@router.post(
    "",
    response_model=DataResponseModel[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a category.",
    responses=category_error_responses,
)
async def create_category(
    category_in: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
) -> Any:
    """Create a root category, or a child when ``parent_id`` is given."""
    category = await service.create(category_in)
    return DataResponseModel[CategoryResponse](message="Category created successfully", data=category)


@router.get(
    "",
    response_model=ListResponseModel[List[CategoryTreeNode]],
    summary="List categories as a tree.",
    responses=category_error_responses,
)
async def list_categories(service: CategoryService = Depends(get_category_service)) -> Any:
    """Return all categories nested under their parents; ``total`` counts every category."""
    forest = await service.list_tree()
    return ListResponseModel[List[CategoryTreeNode]](
        message="Categories fetched successfully",
        data=forest.nodes,
        total=forest.total,
    )


@router.put(
    "/{category_id}",
    response_model=DataResponseModel[CategoryResponse],
    summary="Update a category.",
    responses=category_error_responses,
)
async def update_category(
    category_id: str,
    category_in: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
) -> Any:
    """Rename a category or change its status. Deactivation cascades to the whole subtree."""
    category = await service.update(category_id, category_in)
    return DataResponseModel[CategoryResponse](message="Category updated successfully", data=category)


@router.delete(
    "/{category_id}",
    response_model=DataResponseModel[CategoryDeleted],
    summary="Delete a category.",
    responses=category_error_responses,
)
async def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
) -> Any:
    """Delete a category; its direct children move up to its parent."""
    deleted = await service.delete(category_id)
    return DataResponseModel[CategoryDeleted](
        message="Category deleted successfully. Children reassigned to parent.",
        data=CategoryDeleted(deleted_category=deleted),
    )
