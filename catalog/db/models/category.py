"""
Database model for categories.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, String

from catalog.db.session import Base


class CategoryStatus(str, Enum):
    """
    Enumeration of possible category statuses.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"


class Category(Base):
    """
    A node in the category forest.

    The hierarchy is a plain parent pointer; a NULL ``parent_id`` marks a root.
    """

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid4()))
    name = Column(String(100), nullable=False, unique=True, index=True)
    parent_id = Column(String(36), ForeignKey("categories.id"), nullable=True, index=True)
    status = Column(
        String(20),
        nullable=False,
        index=True,
        default=CategoryStatus.ACTIVE.value,
        server_default=CategoryStatus.ACTIVE.value,
    )

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (Index("ix_categories_parent_id_status", "parent_id", "status"),)

    def __repr__(self) -> str:
        return f"<Category id={self.id!r} name={self.name!r} parent_id={self.parent_id!r}>"
