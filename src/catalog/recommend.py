"""Similar-product recommendations for the product detail page.

Recommendations come from two tiers, filled in order:

1. same category and same brand as the source product;
2. same category and a different brand.

Each tier is an unweighted random sample capped by the capacity the previous
tiers left over, so the result never exceeds the limit and Tier 1 products
always come first.
"""

import logging
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from src.api.exceptions import CatalogUnavailableError, ProductNotFoundError, ShopCatalogException
from src.catalog.models import Product
from src.catalog.predicates import (
    BrandIdEquals,
    CategoryIdEquals,
    ExcludeIds,
    Predicate,
    combine_all,
)
from src.catalog.snapshot import CatalogSnapshot, aggregate_products
from src.config import DEFAULT_RECOMMENDATION_LIMIT

# Configure module logger
logger = logging.getLogger(__name__)


def fill_tier(
    snapshot: CatalogSnapshot,
    predicates: Sequence[Predicate],
    remaining: int,
    rng: np.random.Generator,
) -> List[int]:
    """Sample up to ``remaining`` product ids matching every predicate."""
    if remaining <= 0:
        return []

    products = snapshot.products
    candidates = products.loc[combine_all(products, list(predicates)), "id"].to_numpy()
    if len(candidates) == 0:
        return []

    size = min(remaining, len(candidates))
    picked = rng.choice(candidates, size=size, replace=False)
    return [int(pid) for pid in picked]


def recommendation_tiers(
    category_id: int, brand_id: int, product_id: int
) -> List[Tuple[str, List[Predicate]]]:
    """Ordered (name, predicates) steps for a source product."""
    exclude_source = ExcludeIds(frozenset([product_id]))
    return [
        (
            "same_brand",
            [CategoryIdEquals(category_id), BrandIdEquals(brand_id), exclude_source],
        ),
        (
            "other_brand",
            [CategoryIdEquals(category_id), BrandIdEquals(brand_id, negate=True), exclude_source],
        ),
    ]


def recommend_similar_products(
    snapshot: CatalogSnapshot,
    product_id: int,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    rng: Optional[np.random.Generator] = None,
) -> List[Product]:
    """Pick up to ``limit`` products similar to ``product_id``.

    Args:
        snapshot: Catalog snapshot to read from.
        product_id: Source product shown on the detail page.
        limit: Maximum number of recommendations (default: 4).
        rng: Random generator; an unseeded one is created when omitted.

    Returns:
        Tier 1 products followed by Tier 2 products, never including the
        source product. Empty when neither tier has candidates.

    Raises:
        ProductNotFoundError: If the source product does not exist.
        CatalogUnavailableError: If the read fails.
    """
    start_time = time.time()
    rng = rng if rng is not None else np.random.default_rng()

    source = snapshot.products[snapshot.products["id"] == product_id]
    if source.empty:
        logger.warning(
            "Recommendation source not found",
            extra={"product_id": product_id},
        )
        raise ProductNotFoundError(product_id)

    category_id = int(source.iloc[0]["category_id"])
    brand_id = int(source.iloc[0]["brand_id"])

    try:
        picked: List[int] = []
        for tier_name, predicates in recommendation_tiers(category_id, brand_id, product_id):
            tier_ids = fill_tier(snapshot, predicates, limit - len(picked), rng)
            logger.debug(
                "Filled recommendation tier",
                extra={"tier": tier_name, "product_id": product_id, "picked": tier_ids},
            )
            picked.extend(tier_ids)

        picked = picked[:limit]
        rows = snapshot.products.set_index("id", drop=False).loc[picked].reset_index(drop=True)
        recommendations = aggregate_products(snapshot, rows)
    except ShopCatalogException:
        raise
    except Exception as e:
        logger.error(
            "Recommendation selection failed",
            extra={"product_id": product_id, "error": str(e), "error_type": type(e).__name__},
            exc_info=True,
        )
        raise CatalogUnavailableError("recommend_similar_products", e) from e

    total_time = time.time() - start_time
    logger.info(
        "Recommendations generated",
        extra={
            "product_id": product_id,
            "num_recommendations": len(recommendations),
            "total_time_ms": round(total_time * 1000, 2),
        },
    )

    return recommendations
