"""Catalog snapshot construction and per-product aggregation.

A snapshot is the immutable, normalized view of the catalog that every
request reads from. It is built once from the raw relational tables
(products, categories, brands, pictures, sizes) and then only read.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from src.catalog.models import (
    DEFAULT_PICTURE_MARKER,
    HOVER_PICTURE_MARKER,
    Product,
    SizeStock,
    pick_picture,
)

# Configure module logger
logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = [
    "id",
    "product_name",
    "price",
    "discount_price",
    "effective_price",
    "description",
    "category_id",
    "category_name",
    "brand_id",
    "brand_name",
]


@dataclass(frozen=True, eq=False)
class CatalogSnapshot:
    """Read-only catalog tables.

    Attributes:
        products: One row per product, ordered by id, joined with category
            and brand names and carrying normalized price columns.
        pictures: ``product_id, picture_url`` rows in display order.
        sizes: ``product_id, size, stock`` rows.
        categories: ``id, name`` rows.
        brands: ``id, name`` rows.
    """

    products: pd.DataFrame
    pictures: pd.DataFrame
    sizes: pd.DataFrame
    categories: pd.DataFrame
    brands: pd.DataFrame

    @property
    def product_count(self) -> int:
        return int(len(self.products))


def _coerce_ids(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    """Drop rows whose id columns are not integers and cast the rest."""
    df = df.copy()
    for column in columns:
        df[column] = pd.to_numeric(df[column], errors="coerce")
    before = len(df)
    df = df.dropna(subset=columns)
    if len(df) < before:
        logger.warning(f"Dropped {before - len(df)} rows with malformed ids {columns}")
    for column in columns:
        df[column] = df[column].astype(np.int64)
    return df


def normalize_prices(products: pd.DataFrame) -> pd.DataFrame:
    """Add numeric ``price``, ``discount_price`` and ``effective_price``.

    Malformed or missing prices become 0. A discount is kept only when it is
    strictly positive and strictly below the list price; otherwise it is NaN
    and the effective price is the list price.
    """
    products = products.copy()
    price = pd.to_numeric(products["price"], errors="coerce").fillna(0.0).clip(lower=0.0)
    discount = pd.to_numeric(products["discount_price"], errors="coerce")
    valid_discount = discount.notna() & (discount > 0) & (discount < price)

    products["price"] = price.astype(float)
    products["discount_price"] = discount.where(valid_discount).astype(float)
    products["effective_price"] = products["discount_price"].where(valid_discount, price)
    return products


def build_snapshot(tables: Dict[str, pd.DataFrame]) -> CatalogSnapshot:
    """Build an immutable snapshot from raw catalog tables.

    Args:
        tables: Output of load_catalog_tables(), or equivalent frames.

    Returns:
        A CatalogSnapshot. Products whose category or brand does not exist
        are left out, matching an inner join on both.
    """
    categories = _coerce_ids(tables["categories"][["id", "name"]], ["id"])
    brands = _coerce_ids(tables["brands"][["id", "name"]], ["id"])
    categories["name"] = categories["name"].astype(str)
    brands["name"] = brands["name"].astype(str)

    products = tables["products"].copy()
    if "description" not in products.columns:
        products["description"] = ""
    products = _coerce_ids(products, ["id", "category_id", "brand_id"])
    products = products.drop_duplicates(subset="id", keep="first")
    products = normalize_prices(products)
    products["product_name"] = products["product_name"].fillna("").astype(str)
    products["description"] = products["description"].fillna("").astype(str)

    products = products.merge(
        categories.rename(columns={"id": "category_id", "name": "category_name"}),
        on="category_id",
        how="inner",
    ).merge(
        brands.rename(columns={"id": "brand_id", "name": "brand_name"}),
        on="brand_id",
        how="inner",
    )
    products = products[PRODUCT_COLUMNS].sort_values("id").reset_index(drop=True)

    known_ids = set(products["id"].tolist())

    pictures = _coerce_ids(tables["pictures"][["id", "product_id", "picture_url"]], ["id", "product_id"])
    pictures = pictures[pictures["product_id"].isin(known_ids)].dropna(subset=["picture_url"])
    pictures["picture_url"] = pictures["picture_url"].astype(str)
    pictures = pictures.sort_values(["product_id", "id"]).reset_index(drop=True)

    sizes = _coerce_ids(tables["sizes"][["product_id", "size", "stock"]], ["product_id"])
    sizes = sizes[sizes["product_id"].isin(known_ids)].copy()
    sizes["stock"] = (
        pd.to_numeric(sizes["stock"], errors="coerce").fillna(0).clip(lower=0).astype(np.int64)
    )
    sizes["size"] = sizes["size"].astype(object).where(sizes["size"].notna(), None)
    sizes = sizes.drop_duplicates().reset_index(drop=True)

    logger.info(
        "Built catalog snapshot",
        extra={
            "num_products": len(products),
            "num_pictures": len(pictures),
            "num_sizes": len(sizes),
            "num_categories": len(categories),
            "num_brands": len(brands),
        },
    )

    return CatalogSnapshot(
        products=products,
        pictures=pictures,
        sizes=sizes,
        categories=categories.sort_values("id").reset_index(drop=True),
        brands=brands.sort_values("id").reset_index(drop=True),
    )


def _optional_float(value) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def aggregate_products(snapshot: CatalogSnapshot, rows: pd.DataFrame) -> List[Product]:
    """Attach ordered pictures and size/stock entries to product rows.

    Produces exactly one Product per input row, in input order, regardless
    of how many pictures or sizes each product has.
    """
    if rows.empty:
        return []

    ids = rows["id"].tolist()

    pictures = snapshot.pictures[snapshot.pictures["product_id"].isin(ids)]
    pictures_by_id = pictures.groupby("product_id", sort=False)["picture_url"].apply(list).to_dict()

    sizes = snapshot.sizes[snapshot.sizes["product_id"].isin(ids)]
    sizes_by_id: Dict[int, List[SizeStock]] = {}
    for record in sizes.to_dict("records"):
        size = record["size"]
        sizes_by_id.setdefault(int(record["product_id"]), []).append(
            SizeStock(size=None if size is None or pd.isna(size) else str(size), stock=int(record["stock"]))
        )

    products = []
    for record in rows.to_dict("records"):
        product_id = int(record["id"])
        product_pictures = pictures_by_id.get(product_id, [])
        products.append(
            Product(
                id=product_id,
                product_name=record["product_name"],
                price=float(record["price"]) if not pd.isna(record["price"]) else 0.0,
                discount_price=_optional_float(record["discount_price"]),
                description=record["description"],
                category_name=record["category_name"],
                brand_name=record["brand_name"],
                pictures=product_pictures,
                default_picture=pick_picture(product_pictures, DEFAULT_PICTURE_MARKER),
                hover_picture=pick_picture(product_pictures, HOVER_PICTURE_MARKER),
                sizes=sizes_by_id.get(product_id, []),
            )
        )
    return products
