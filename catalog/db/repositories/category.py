"""
Store access for categories.

``CategoryRepository`` is the only place that talks SQL for the category
forest. Every write commits immediately, so a service operation made of
several calls is a sequence of independent commits, not one transaction.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.exceptions import Conflict, NotFound, StoreFailure
from catalog.core.metrics import time_db_query
from catalog.db.models.category import Category

ALL = object()


UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _violated(error: IntegrityError) -> Optional[str]:
    """
    Tell which category constraint an integrity error comes from.

    Returns ``"name"`` for the unique name, ``"parent"`` for the parent
    foreign key and ``None`` for anything else. Postgres reports a SQLSTATE
    code; SQLite only reports a message.
    """
    code = getattr(error.orig, "pgcode", None) or getattr(error.orig, "sqlstate", None)
    message = str(error.orig).lower()
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in message:
        return "parent"
    if (code == UNIQUE_VIOLATION or "unique" in message) and "name" in message:
        return "name"
    return None


class CategoryRepository:
    """Document-store style primitives over the ``categories`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _guard(self, action: str, sets_parent: bool = True) -> AsyncIterator[None]:
        """
        Translate store errors raised by ``action`` into domain errors.

        A broken parent reference is a missing parent only for writes that
        set ``parent_id``; a delete that still has children is a store failure.
        """
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Integrity error while trying to {action}: {e.orig}")
            violated = _violated(e)
            if violated == "name":
                raise Conflict("Category with this name already exists", detail=str(e.orig)) from e
            if violated == "parent" and sets_parent:
                raise NotFound("Parent category not found", detail=str(e.orig)) from e
            raise StoreFailure(f"Failed to {action}", detail=str(e.orig)) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error while trying to {action}: {e}")
            raise StoreFailure(f"Failed to {action}", detail=str(e)) from e

    def _conditions(self, filters: Dict[str, Any]) -> List[Any]:
        conditions = []
        for field, value in filters.items():
            column = getattr(Category, field)
            if value is None:
                conditions.append(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        return conditions

    @time_db_query("select")
    async def find_all(self, parent_id: Any = ALL) -> List[Category]:
        """
        Return categories in creation order.

        Without arguments every category is returned; ``parent_id=None``
        selects roots and any other value selects that node's direct children.
        """
        query = select(Category).order_by(Category.created_at.asc()).execution_options(populate_existing=True)
        if parent_id is not ALL:
            query = query.where(*self._conditions({"parent_id": parent_id}))

        async with self._guard("load categories"):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    @time_db_query("select")
    async def find_by_id(self, category_id: str) -> Optional[Category]:
        async with self._guard("load category"):
            query = select(Category).where(Category.id == str(category_id)).execution_options(populate_existing=True)
            result = await self.db.execute(query)
            return result.scalar_one_or_none()

    @time_db_query("select")
    async def find_by_name(self, name: str) -> Optional[Category]:
        async with self._guard("load category"):
            result = await self.db.execute(select(Category).where(Category.name == name))
            return result.scalars().first()

    @time_db_query("insert")
    async def insert(self, category: Category) -> Category:
        async with self._guard("create category"):
            self.db.add(category)
            await self.db.commit()
            await self.db.refresh(category)
        return category

    @time_db_query("update")
    async def save(self, category: Category) -> Category:
        """Persist attribute changes made on an already loaded category."""
        async with self._guard("update category"):
            await self.db.commit()
            await self.db.refresh(category)
        return category

    @time_db_query("bulk_update")
    async def update_many(self, filters: Dict[str, Any], patch: Dict[str, Any]) -> int:
        """Apply ``patch`` to every category matching ``filters``; return the row count."""
        statement = (
            update(Category)
            .where(*self._conditions(filters))
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        async with self._guard("update categories"):
            result = await self.db.execute(statement)
            await self.db.commit()
        return max(int(result.rowcount or 0), 0)

    @time_db_query("delete")
    async def delete_by_id(self, category_id: str) -> Optional[Category]:
        """Remove a category and return it, or None when nothing matched."""
        category = await self.find_by_id(category_id)
        if category is None:
            return None

        async with self._guard("delete category", sets_parent=False):
            await self.db.delete(category)
            await self.db.commit()
        return category
