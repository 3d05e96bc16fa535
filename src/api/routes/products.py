"""Product catalog endpoints for the ShopCatalog API.

This module provides the listing, facet, product detail and similar-product
endpoints. Every handler reads one snapshot from the shared CatalogStore.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, TypeVar

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from src.api.metrics import metrics_service
from src.catalog.facets import compute_facets
from src.catalog.models import CatalogFacets, CatalogPage, CatalogRequest, Product
from src.catalog.query import get_product, query_catalog
from src.catalog.recommend import recommend_similar_products
from src.catalog.store import CatalogStore
from src.config import get_settings

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/api/products",
    tags=["products"],
)

T = TypeVar("T")

# Shared store, created on first use
_catalog_store: Optional[CatalogStore] = None


class CatalogResponse(BaseModel):
    """Response model for listing requests."""

    status: str = Field(default="success")
    data: CatalogPage


class FacetsResponse(BaseModel):
    """Response model for the categories-and-brands request."""

    status: str = Field(default="success")
    data: CatalogFacets


class ProductResponse(BaseModel):
    status: str = Field(default="success")
    data: Product


class RecommendationResponse(BaseModel):
    """Response model for similar-product requests (at most 4 items)."""

    status: str = Field(default="success")
    data: List[Product]


def get_catalog_store() -> CatalogStore:
    """FastAPI dependency returning the process-wide catalog store."""
    global _catalog_store

    if _catalog_store is None:
        _catalog_store = CatalogStore(get_settings().snapshot_dir)
    return _catalog_store


def _timed(operation: str, func: Callable[..., T], *args, **kwargs) -> T:
    """Run ``func`` and record its latency under ``operation``."""
    start_time = time.time()
    failed = False
    try:
        return func(*args, **kwargs)
    except Exception:
        failed = True
        raise
    finally:
        metrics_service.record(operation, (time.time() - start_time) * 1000, failed=failed)


@router.get("", response_model=CatalogResponse)
def list_products(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    search: str = "",
    category: str = "",
    brand: str = "",
    sort: str = "default",
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    store: CatalogStore = Depends(get_catalog_store),
) -> CatalogResponse:
    """Get one page of the product listing.

    Malformed prices and unknown sort keys are ignored rather than rejected;
    an inverted price range means no price constraint.

    Example:
        GET /api/products?category=Violins&sort=priceAsc&minPrice=500&page=2
    """
    settings = get_settings()
    request = CatalogRequest(
        page=page,
        limit=min(limit or settings.page_size, settings.max_page_size),
        search=search,
        category=category,
        brand=brand,
        sort=sort,
        min_price=min_price,
        max_price=max_price,
    )
    catalog_page = _timed("query_catalog", query_catalog, store.snapshot(), request)
    return CatalogResponse(data=catalog_page)


@router.get("/categories-and-brands", response_model=FacetsResponse)
def get_categories_and_brands(
    store: CatalogStore = Depends(get_catalog_store),
) -> FacetsResponse:
    """Get category and brand counts and the catalog price range."""
    facets = _timed("compute_facets", compute_facets, store.snapshot())
    return FacetsResponse(data=facets)


@router.get("/recommend/{product_id}", response_model=RecommendationResponse)
def get_recommendations(
    product_id: int,
    store: CatalogStore = Depends(get_catalog_store),
) -> RecommendationResponse:
    """Get up to four products similar to ``product_id``.

    Products sharing category and brand come first, then products from the
    same category with another brand. Returns 404 for an unknown product.
    """
    logger.info(f"Generating recommendations for product {product_id}")
    recommendations = _timed(
        "recommend_similar_products",
        recommend_similar_products,
        store.snapshot(),
        product_id,
        limit=get_settings().recommendation_limit,
    )
    return RecommendationResponse(data=recommendations)


@router.post("/reload-catalog")
def reload_catalog(store: CatalogStore = Depends(get_catalog_store)) -> Dict[str, str]:
    """Reload the catalog snapshot from disk.

    Useful after a new snapshot has been built without restarting the server.
    """
    snapshot = store.reload()
    return {"status": f"Catalog reloaded with {snapshot.product_count} products"}


@router.get("/{product_id}", response_model=ProductResponse)
def get_product_detail(
    product_id: int,
    store: CatalogStore = Depends(get_catalog_store),
) -> ProductResponse:
    """Get one product with its pictures and sizes."""
    product = _timed("get_product", get_product, store.snapshot(), product_id)
    return ProductResponse(data=product)
