"""Async HTTP client for the ShopCatalog API."""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx
from pydantic import ValidationError

from src.catalog.models import CatalogFacets, CatalogPage, CatalogRequest, Product
from src.config import get_settings

# Configure module logger
logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogClientError(Exception):
    """Raised when a catalog request fails.

    Attributes:
        status_code: HTTP status, or None when the service was unreachable.
        retryable: True for connection failures and 5xx responses.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retryable = retryable


class ProductNotFoundClientError(CatalogClientError):
    """Raised when the requested product id does not exist."""


class CatalogApiClient:
    """Thin async wrapper over the catalog endpoints.

    Example:
        >>> async with CatalogApiClient("http://localhost:8000") as client:
        ...     facets = await client.fetch_facets()
        ...     page = await client.fetch_products(CatalogRequest(category="Violins"))
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "CatalogApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        not_found_is_product: bool = False,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.RequestError as e:
            logger.error(f"Catalog request to {path} failed: {e}")
            raise CatalogClientError(f"Catalog service unreachable: {e}", retryable=True) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogClientError(
                f"Invalid response from {path}",
                status_code=response.status_code,
                retryable=response.status_code >= 500,
            ) from e

        message = payload.get("message") if isinstance(payload, dict) else None
        if response.status_code == 404 and not_found_is_product:
            raise ProductNotFoundClientError(message or "Not found", status_code=404)
        if response.is_error or not isinstance(payload, dict) or payload.get("status") != "success":
            logger.warning(f"Catalog request to {path} returned {response.status_code}: {message}")
            raise CatalogClientError(
                message or f"Catalog request failed with HTTP {response.status_code}",
                status_code=response.status_code,
                retryable=response.status_code >= 500,
            )

        if "data" not in payload:
            raise CatalogClientError(
                f"Invalid response from {path}: missing data",
                status_code=response.status_code,
            )
        return payload["data"]

    @staticmethod
    def _parse(path: str, parse: Callable[[Any], T], data: Any) -> T:
        """Validate response data, mapping schema errors to CatalogClientError."""
        try:
            return parse(data)
        except (ValidationError, TypeError) as e:
            logger.warning(f"Malformed response from {path}: {e}")
            raise CatalogClientError(f"Invalid response from {path}") from e

    async def fetch_products(self, request: CatalogRequest) -> CatalogPage:
        path = "/api/products"
        data = await self._get(path, params=request.to_query_params())
        return self._parse(path, CatalogPage.model_validate, data)

    async def fetch_facets(self) -> CatalogFacets:
        path = "/api/products/categories-and-brands"
        data = await self._get(path)
        return self._parse(path, CatalogFacets.model_validate, data)

    async def fetch_product(self, product_id: int) -> Product:
        path = f"/api/products/{product_id}"
        data = await self._get(path, not_found_is_product=True)
        return self._parse(path, Product.model_validate, data)

    async def fetch_recommendations(self, product_id: int) -> List[Product]:
        path = f"/api/products/recommend/{product_id}"
        data = await self._get(path, not_found_is_product=True)
        return self._parse(path, lambda items: [Product.model_validate(item) for item in items], data)
