"""Typed filter predicates for catalog reads.

Each predicate carries its own parameter bindings and evaluates to a boolean
mask over the flat product frame of a snapshot. Predicates are always
combined with logical AND, so the order in which they are assembled never
changes the result.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from src.catalog.models import CatalogRequest


class Predicate:
    """Base class for a single filter over the product frame."""

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        raise NotImplementedError

    @property
    def bindings(self) -> Dict[str, Any]:
        return {}

    def describe(self) -> Dict[str, Any]:
        """Name and bindings, used for structured logging."""
        return {"predicate": type(self).__name__, **self.bindings}


@dataclass(frozen=True)
class CategoryEquals(Predicate):
    name: str

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        return products["category_name"] == self.name

    @property
    def bindings(self) -> Dict[str, Any]:
        return {"category": self.name}


@dataclass(frozen=True)
class BrandEquals(Predicate):
    name: str

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        return products["brand_name"] == self.name

    @property
    def bindings(self) -> Dict[str, Any]:
        return {"brand": self.name}


@dataclass(frozen=True)
class TextSearch(Predicate):
    """Case-insensitive substring match on name, brand or category."""

    term: str
    columns: Sequence[str] = ("product_name", "brand_name", "category_name")

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        mask = pd.Series(False, index=products.index)
        for column in self.columns:
            mask |= products[column].astype(str).str.contains(
                self.term, case=False, regex=False, na=False
            )
        return mask

    @property
    def bindings(self) -> Dict[str, Any]:
        return {"search": self.term}


@dataclass(frozen=True)
class EffectivePriceBetween(Predicate):
    """Inclusive range on effective price; either bound may be open."""

    min_price: Optional[float] = None
    max_price: Optional[float] = None

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        prices = products["effective_price"]
        mask = pd.Series(True, index=products.index)
        if self.min_price is not None:
            mask &= prices >= self.min_price
        if self.max_price is not None:
            mask &= prices <= self.max_price
        return mask

    @property
    def bindings(self) -> Dict[str, Any]:
        return {"min_price": self.min_price, "max_price": self.max_price}


@dataclass(frozen=True)
class CategoryIdEquals(Predicate):
    category_id: int

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        return products["category_id"] == self.category_id

    @property
    def bindings(self) -> Dict[str, Any]:
        return {"category_id": self.category_id}


@dataclass(frozen=True)
class BrandIdEquals(Predicate):
    brand_id: int
    negate: bool = False

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        mask = products["brand_id"] == self.brand_id
        return ~mask if self.negate else mask

    @property
    def bindings(self) -> Dict[str, Any]:
        return {"brand_id": self.brand_id, "negate": self.negate}


@dataclass(frozen=True)
class ExcludeIds(Predicate):
    product_ids: frozenset = field(default_factory=frozenset)

    def evaluate(self, products: pd.DataFrame) -> pd.Series:
        return ~products["id"].isin(list(self.product_ids))

    @property
    def bindings(self) -> Dict[str, Any]:
        return {"exclude_ids": sorted(self.product_ids)}


def combine_all(products: pd.DataFrame, predicates: List[Predicate]) -> pd.Series:
    """AND every predicate together; an empty list matches all rows."""
    mask = pd.Series(np.ones(len(products), dtype=bool), index=products.index)
    for predicate in predicates:
        mask &= predicate.evaluate(products).fillna(False).astype(bool)
    return mask


def build_predicates(request: CatalogRequest) -> List[Predicate]:
    """Assemble the predicate list for a canonical filter request.

    Only non-empty filters contribute a predicate. The request has already
    dropped inverted price ranges, so any remaining bound is applied as is.
    """
    predicates: List[Predicate] = []

    if request.category:
        predicates.append(CategoryEquals(request.category))
    if request.brand:
        predicates.append(BrandEquals(request.brand))
    if request.search:
        predicates.append(TextSearch(request.search))
    if request.min_price is not None or request.max_price is not None:
        predicates.append(EffectivePriceBetween(request.min_price, request.max_price))

    return predicates
