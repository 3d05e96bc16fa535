"""ShopCatalog: storefront catalog query and recommendation engine.

This package provides a backend service for filtered, paginated product
listings and similar-product recommendations, plus the client-side filter
state logic that drives it.

Modules:
    api: FastAPI application and REST API endpoints
    catalog: Snapshot store, listing queries, facets and recommendations
    client: Filter state normalizer and async catalog session
"""

__version__ = "0.1.0"
