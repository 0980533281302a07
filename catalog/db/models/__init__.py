"""
Database models.
"""

from catalog.db.models.category import Category, CategoryStatus
from catalog.db.models.user import User

__all__ = [
    "Category",
    "CategoryStatus",
    "User",
]
