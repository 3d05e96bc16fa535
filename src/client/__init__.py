"""Client-side catalog browsing for ShopCatalog.

This module contains the filter state normalizer (price slider, typed
prices, debounced search), the async HTTP client for the catalog API and the
browsing session that discards stale listing responses.
"""
