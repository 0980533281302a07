"""
Domain errors raised by the catalog services.

The API layer translates these into transport responses in
``catalog.api.errors``; services never deal with status codes.
"""

from typing import List, Optional, Tuple


class CatalogError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationFailed(CatalogError):
    """Input did not satisfy the structural constraints of a payload."""

    def __init__(self, errors: List[Tuple[str, str]]):
        super().__init__("Validation failed")
        self.errors = errors

    def as_dicts(self) -> List[dict]:
        return [{"field": field, "message": message} for field, message in self.errors]


class NotFound(CatalogError):
    """A referenced record does not exist."""


class Conflict(CatalogError):
    """A uniqueness constraint would be violated."""


class StoreFailure(CatalogError):
    """The underlying store failed unexpectedly."""
