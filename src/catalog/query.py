"""Catalog query builder.

Turns a canonical CatalogRequest into one page of products plus the two
counts the listing needs: products matching the active filters, and the
size of the whole catalog. All three are read from the same snapshot with
the same predicate list.
"""

import logging
import math
import time
from typing import List

import pandas as pd

from src.api.exceptions import CatalogUnavailableError, ProductNotFoundError, ShopCatalogException
from src.catalog.models import CatalogPage, CatalogRequest, Product, SortKey
from src.catalog.predicates import build_predicates, combine_all
from src.catalog.snapshot import CatalogSnapshot, aggregate_products

# Configure module logger
logger = logging.getLogger(__name__)


def sort_products(products: pd.DataFrame, sort: SortKey) -> pd.DataFrame:
    """Order matched products for display.

    The input is id-ordered, and price sorts are stable, so equal prices
    keep ascending id order. The default order is ascending id.
    """
    if sort == SortKey.PRICE_ASC:
        return products.sort_values("effective_price", ascending=True, kind="mergesort")
    if sort == SortKey.PRICE_DESC:
        return products.sort_values("effective_price", ascending=False, kind="mergesort")
    if sort == SortKey.NEWEST:
        return products.sort_values("id", ascending=False, kind="mergesort")
    return products.sort_values("id", ascending=True, kind="mergesort")


def query_catalog(snapshot: CatalogSnapshot, request: CatalogRequest) -> CatalogPage:
    """Run a filtered, sorted and paginated listing query.

    Args:
        snapshot: Catalog snapshot to read from.
        request: Canonical filter request.

    Returns:
        CatalogPage with up to ``request.limit`` products, the filtered
        total and the unfiltered catalog size.

    Raises:
        CatalogUnavailableError: If the read fails for any reason. No partial
            result is returned.

    Example:
        >>> page = query_catalog(snapshot, CatalogRequest(category="Violins", sort="priceAsc"))
        >>> print(page.total, len(page.products))
    """
    start_time = time.time()
    predicates = build_predicates(request)

    logger.info(
        "Running catalog query",
        extra={
            "page": request.page,
            "limit": request.limit,
            "sort": request.sort.value,
            "predicates": [p.describe() for p in predicates],
        },
    )

    try:
        products = snapshot.products
        matched = products[combine_all(products, predicates)]

        total = int(len(matched))
        overall_total = int(len(products))

        ordered = sort_products(matched, request.sort)
        page_rows = ordered.iloc[request.offset : request.offset + request.limit]
        page_products = aggregate_products(snapshot, page_rows)
    except ShopCatalogException:
        raise
    except Exception as e:
        logger.error(
            "Catalog query failed",
            extra={"error": str(e), "error_type": type(e).__name__},
            exc_info=True,
        )
        raise CatalogUnavailableError("query_catalog", e) from e

    total_time = time.time() - start_time
    logger.info(
        "Catalog query completed",
        extra={
            "total": total,
            "overall_total": overall_total,
            "returned": len(page_products),
            "total_time_ms": round(total_time * 1000, 2),
        },
    )

    return CatalogPage(
        products=page_products,
        total=total,
        overall_total=overall_total,
        total_pages=math.ceil(total / request.limit) if total else 0,
    )


def get_product(snapshot: CatalogSnapshot, product_id: int) -> Product:
    """Look up one product with its pictures and sizes.

    Raises:
        ProductNotFoundError: If no product has this id.
        CatalogUnavailableError: If the read fails.
    """
    try:
        rows = snapshot.products[snapshot.products["id"] == product_id]
        products: List[Product] = aggregate_products(snapshot, rows)
    except Exception as e:
        logger.error(f"Product lookup failed for {product_id}: {e}", exc_info=True)
        raise CatalogUnavailableError("get_product", e) from e

    if not products:
        logger.warning(f"Product {product_id} not found")
        raise ProductNotFoundError(product_id)

    return products[0]
