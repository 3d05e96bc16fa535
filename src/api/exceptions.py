"""Custom exceptions for the ShopCatalog API.

Defines specific exception types for better error handling and reporting.
The catalog engine raises these; the API layer renders them as JSON.
"""

from typing import Any, Dict, Optional


class ShopCatalogException(Exception):
    """Base exception for ShopCatalog errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class SnapshotNotFoundError(ShopCatalogException):
    """Raised when the catalog snapshot files cannot be found."""

    def __init__(self, snapshot_dir: str, details: Optional[Dict[str, Any]] = None):
        message = (
            f"Catalog snapshot not found at '{snapshot_dir}'. "
            "Please build the catalog first."
        )
        super().__init__(
            message=message,
            status_code=503,
            details=details or {"snapshot_dir": snapshot_dir},
        )


class SnapshotLoadError(ShopCatalogException):
    """Raised when the catalog snapshot fails to load."""

    def __init__(self, snapshot_dir: str, error: Exception):
        message = f"Failed to load catalog snapshot from '{snapshot_dir}': {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "snapshot_dir": snapshot_dir,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class ProductNotFoundError(ShopCatalogException):
    """Raised when a product id does not exist in the catalog."""

    def __init__(self, product_id: int, details: Optional[Dict[str, Any]] = None):
        message = f"Product {product_id} not found"
        super().__init__(
            message=message,
            status_code=404,
            details=details or {"product_id": product_id},
        )


class CatalogUnavailableError(ShopCatalogException):
    """Raised when a catalog read fails; the caller may retry."""

    def __init__(self, operation: str, error: Exception):
        message = f"Catalog unavailable while running '{operation}': {str(error)}"
        super().__init__(
            message=message,
            status_code=503,
            details={
                "operation": operation,
                "retryable": True,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
