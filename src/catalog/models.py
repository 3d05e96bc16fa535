"""Data models for the catalog engine.

Pydantic models shared by the query builder, the recommendation selector,
the API routes and the HTTP client.
"""

import logging
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.catalog.utils import parse_number

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_PICTURE_MARKER = "-1."
HOVER_PICTURE_MARKER = "-2."


class SortKey(str, Enum):
    """Supported listing orders."""

    DEFAULT = "default"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"
    OLDEST = "oldest"
    NEWEST = "newest"

    @classmethod
    def parse(cls, value: Any) -> "SortKey":
        """Map a raw sort value to a SortKey, falling back to DEFAULT."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            if value not in (None, "", "relevance"):
                logger.warning(f"Unknown sort key {value!r}, using default order")
            return cls.DEFAULT


class SizeStock(BaseModel):
    """Stock level for one size label (``size`` is None for one-size items)."""

    size: Optional[str] = None
    stock: int = Field(default=0, ge=0)


class Product(BaseModel):
    """A read-only product record as returned to callers.

    Attributes:
        price: List price, always numeric (malformed prices become 0).
        discount_price: Present only when 0 < discount_price < price.
        pictures: Picture identifiers in display order.
        default_picture: First picture containing the ``-1.`` marker.
        hover_picture: First picture containing the ``-2.`` marker.
    """

    id: int
    product_name: str
    price: float = 0.0
    discount_price: Optional[float] = None
    description: str = ""
    category_name: str
    brand_name: str
    pictures: List[str] = Field(default_factory=list)
    default_picture: Optional[str] = None
    hover_picture: Optional[str] = None
    sizes: List[SizeStock] = Field(default_factory=list)

    @property
    def effective_price(self) -> float:
        """Discounted price if a valid discount exists, else the list price."""
        if self.discount_price is not None and 0 < self.discount_price < self.price:
            return self.discount_price
        return self.price


def pick_picture(pictures: List[str], marker: str) -> Optional[str]:
    """Return the first picture whose identifier contains ``marker``."""
    return next((pic for pic in pictures if marker in pic), None)


class CatalogRequest(BaseModel):
    """Canonical, validated filter request for one catalog listing.

    Every field is normalized on construction: blank strings mean "no
    constraint", unknown sort keys fall back to the default order, malformed
    prices are dropped and an inverted price range is discarded entirely.
    """

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=9, ge=1)
    search: str = ""
    category: Optional[str] = None
    brand: Optional[str] = None
    sort: SortKey = SortKey.DEFAULT
    min_price: Optional[float] = Field(default=None, alias="minPrice")
    max_price: Optional[float] = Field(default=None, alias="maxPrice")

    @field_validator("search", mode="before")
    @classmethod
    def _strip_search(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("category", "brand", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("sort", mode="before")
    @classmethod
    def _parse_sort(cls, value: Any) -> SortKey:
        return SortKey.parse(value)

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> Optional[float]:
        return parse_number(value)

    @model_validator(mode="after")
    def _drop_inverted_range(self) -> "CatalogRequest":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.max_price < self.min_price
        ):
            logger.warning(
                "Inverted price range ignored",
                extra={"min_price": self.min_price, "max_price": self.max_price},
            )
            self.min_price = None
            self.max_price = None
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_query_params(self) -> dict:
        """Render the request as HTTP query parameters."""
        params = {
            "page": self.page,
            "limit": self.limit,
            "search": self.search,
            "category": self.category or "",
            "brand": self.brand or "",
            "sort": self.sort.value,
        }
        if self.min_price is not None:
            params["minPrice"] = self.min_price
        if self.max_price is not None:
            params["maxPrice"] = self.max_price
        return params


class CatalogPage(BaseModel):
    """One page of a catalog listing with its counts."""

    model_config = ConfigDict(populate_by_name=True)

    products: List[Product] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Products matching all filters")
    overall_total: int = Field(
        default=0, ge=0, alias="overallTotal", description="Products in the catalog"
    )
    total_pages: int = Field(default=0, ge=0, alias="totalPages")


class FacetCount(BaseModel):
    name: str
    count: int = 0


class PriceRange(BaseModel):
    min_price: int
    max_price: int


class CatalogFacets(BaseModel):
    """Category and brand counts plus the catalog-wide price range."""

    model_config = ConfigDict(populate_by_name=True)

    categories: List[FacetCount] = Field(default_factory=list)
    brands: List[FacetCount] = Field(default_factory=list)
    price_range: PriceRange = Field(alias="priceRange")
