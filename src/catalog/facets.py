"""Filter facets: category and brand counts and the catalog price range."""

import logging
import math
from typing import List

import pandas as pd

from src.api.exceptions import CatalogUnavailableError
from src.catalog.models import CatalogFacets, FacetCount, PriceRange
from src.catalog.snapshot import CatalogSnapshot

# Configure module logger
logger = logging.getLogger(__name__)

FALLBACK_MIN_PRICE = 0
FALLBACK_MAX_PRICE = 1_000_000


def _count_by(names: pd.DataFrame, products: pd.DataFrame, key: str) -> List[FacetCount]:
    """Product count per name, including names with no products."""
    counts = products.groupby(key).size()
    # Grouped by name, so two ids sharing a name count as one facet
    by_name = {}
    for row in names.to_dict("records"):
        name = str(row["name"])
        by_name[name] = by_name.get(name, 0) + int(counts.get(row["id"], 0))
    return [FacetCount(name=name, count=count) for name, count in sorted(by_name.items())]


def compute_price_range(products: pd.DataFrame) -> PriceRange:
    """Integer effective-price extremes over products with a positive price.

    The minimum is floored and the maximum ceiled, so the range always covers
    every priced product.
    """
    priced = products.loc[products["price"] > 0, "effective_price"]
    if priced.empty:
        logger.warning("No priced products, using fallback price range")
        return PriceRange(min_price=FALLBACK_MIN_PRICE, max_price=FALLBACK_MAX_PRICE)
    return PriceRange(
        min_price=math.floor(float(priced.min())),
        max_price=math.ceil(float(priced.max())),
    )


def compute_facets(snapshot: CatalogSnapshot) -> CatalogFacets:
    """Build the facet lists used to seed the client filter panel.

    Raises:
        CatalogUnavailableError: If the read fails.
    """
    try:
        products = snapshot.products
        return CatalogFacets(
            categories=_count_by(snapshot.categories, products, "category_id"),
            brands=_count_by(snapshot.brands, products, "brand_id"),
            price_range=compute_price_range(products),
        )
    except Exception as e:
        logger.error(f"Facet computation failed: {e}", exc_info=True)
        raise CatalogUnavailableError("compute_facets", e) from e
