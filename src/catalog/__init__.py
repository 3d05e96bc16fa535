"""Catalog engine for ShopCatalog.

This module contains the server-side catalog logic: snapshot construction
from the raw catalog tables, typed filter predicates, the paginated listing
query, facet counts and the two-tier similar-product selector.
"""
