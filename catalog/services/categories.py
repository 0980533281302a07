"""Business logic for categories."""

from collections import deque
from typing import Any, List, Mapping, Union

from loguru import logger

from catalog.core.exceptions import Conflict, NotFound
from catalog.core.metrics import observe_bulk_write, record_category_event
from catalog.core.tracing import create_span
from catalog.db.models.category import Category, CategoryStatus
from catalog.db.repositories.category import CategoryRepository
from catalog.schemas.categories import (
    CategoryCreate,
    CategoryForest,
    CategoryResponse,
    CategoryUpdate,
)
from catalog.schemas.validation import validate_payload
from catalog.services.category_tree import build_category_tree

DUPLICATE_NAME = "Category with this name already exists"


class CategoryService:
    """Create, list, update and delete categories while keeping the forest consistent."""

    def __init__(self, repository: CategoryRepository):
        """Initialize with the category store."""
        self.repository = repository

    async def create(self, payload: Union[CategoryCreate, Mapping[str, Any]]) -> CategoryResponse:
        """
        Create a category.

        Raises NotFound when the declared parent does not exist and Conflict
        when the name is already used anywhere in the forest.
        """
        data = validate_payload(CategoryCreate, payload)

        if data.parent_id is not None:
            parent = await self.repository.find_by_id(data.parent_id)
            if parent is None:
                logger.warning(f"Parent category {data.parent_id} not found")
                raise NotFound("Parent category not found")

        if await self.repository.find_by_name(data.name) is not None:
            raise Conflict(DUPLICATE_NAME)

        category = Category(
            name=data.name,
            parent_id=data.parent_id,
            status=(data.status or CategoryStatus.ACTIVE).value,
        )
        category = await self.repository.insert(category)

        logger.info(f"Created category {category.id} ({category.name!r}) under {category.parent_id}")
        record_category_event("created")
        return CategoryResponse.model_validate(category)

    async def list_tree(self) -> CategoryForest:
        """Return every category nested under its parent, roots first."""
        categories = await self.repository.find_all()
        return CategoryForest(nodes=build_category_tree(categories), total=len(categories))

    async def collect_descendant_ids(self, category_id: str) -> List[str]:
        """
        Return the ids of all transitive descendants of ``category_id``.

        Each level is fetched from the store, one query per visited node.
        """
        descendants: List[str] = []
        seen = {str(category_id)}
        pending = deque([str(category_id)])

        while pending:
            current = pending.popleft()
            for child in await self.repository.find_all(parent_id=current):
                child_id = str(child.id)
                if child_id in seen:
                    logger.warning(f"Category {child_id} reached twice while collecting descendants")
                    continue
                seen.add(child_id)
                descendants.append(child_id)
                pending.append(child_id)

        return descendants

    async def update(self, category_id: str, payload: Union[CategoryUpdate, Mapping[str, Any]]) -> CategoryResponse:
        """
        Rename a category and/or change its status.

        Deactivating a category deactivates its whole subtree. Reactivating
        only touches the category itself.
        """
        data = validate_payload(CategoryUpdate, payload)

        category = await self.repository.find_by_id(category_id)
        if category is None:
            logger.warning(f"Category {category_id} not found")
            raise NotFound("Category not found")

        if data.name is not None:
            existing = await self.repository.find_by_name(data.name)
            if existing is not None and str(existing.id) != str(category.id):
                raise Conflict(DUPLICATE_NAME)
            category.name = data.name

        cascade = False
        if data.status is not None and data.status.value != category.status:
            category.status = data.status.value
            cascade = data.status is CategoryStatus.INACTIVE

        category = await self.repository.save(category)
        logger.info(f"Updated category {category.id}")
        record_category_event("updated")

        if cascade:
            await self._deactivate_subtree(str(category.id))

        return CategoryResponse.model_validate(category)

    async def _deactivate_subtree(self, category_id: str) -> None:
        with create_span("category.cascade_inactive", {"category.id": category_id}) as span:
            descendant_ids = await self.collect_descendant_ids(category_id)
            span.set_attribute("category.descendants", len(descendant_ids))
            if not descendant_ids:
                return
            count = await self.repository.update_many(
                {"id": descendant_ids},
                {"status": CategoryStatus.INACTIVE.value},
            )
        observe_bulk_write("cascade_inactive", count)
        logger.info(f"Deactivated {count} descendants of category {category_id}")
        record_category_event("cascade_inactive")

    async def delete(self, category_id: str) -> CategoryResponse:
        """
        Delete a category, moving its direct children up to its own parent.

        Returns the category as it was before deletion.
        """
        category = await self.repository.find_by_id(category_id)
        if category is None:
            logger.warning(f"Category {category_id} not found")
            raise NotFound("Category not found")

        snapshot = CategoryResponse.model_validate(category)

        with create_span("category.reparent_children", {"category.id": snapshot.id}) as span:
            moved = await self.repository.update_many(
                {"parent_id": snapshot.id},
                {"parent_id": snapshot.parent_id},
            )
            span.set_attribute("category.children_moved", moved)
        observe_bulk_write("reparent", moved)
        if moved:
            logger.info(f"Moved {moved} children of category {snapshot.id} to {snapshot.parent_id}")

        await self.repository.delete_by_id(snapshot.id)

        logger.info(f"Deleted category {snapshot.id}")
        record_category_event("deleted")
        return snapshot

