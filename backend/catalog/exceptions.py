"""
Custom Exceptions
Error kinds raised by the catalog core
"""

from typing import Optional


class CatalogError(Exception):
    """Base exception for all catalog errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(CatalogError):
    """An expected absence rather than a storage defect"""


class CategoryResolutionFailed(CatalogError):
    """Raised when a category id cannot be looked up or created"""

    def __init__(self, category_name: str, error: str):
        super().__init__(
            message=f"Failed to resolve category: {category_name}",
            code="CATEGORY_RESOLUTION_FAILED",
            details={"category": category_name, "error": error}
        )


class ImageWriteFailed(CatalogError):
    """Raised when image bytes cannot be persisted"""

    def __init__(self, reference: str, error: str):
        super().__init__(
            message=f"Failed to write image: {reference}",
            code="IMAGE_WRITE_FAILED",
            details={"reference": reference, "error": error}
        )


class ImageNotFound(NotFoundError):
    """Raised when no stored image matches a reference"""

    def __init__(self, reference: str):
        super().__init__(
            message=f"Image not found: {reference}",
            code="IMAGE_NOT_FOUND",
            details={"reference": reference}
        )


class InsertFailed(CatalogError):
    """Raised when an item row cannot be written"""

    def __init__(self, item_name: str, error: str):
        super().__init__(
            message=f"Failed to insert item: {item_name}",
            code="INSERT_FAILED",
            details={"name": item_name, "error": error}
        )


class ItemNotFound(NotFoundError):
    """Raised when no item has the requested id"""

    def __init__(self, item_id: int):
        super().__init__(
            message=f"Item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id}
        )


class SearchFailed(CatalogError):
    """Raised when a read query against the items table fails"""

    def __init__(self, query: str, error: str):
        super().__init__(
            message=f"Failed to query items: {query}",
            code="SEARCH_FAILED",
            details={"query": query, "error": error}
        )
