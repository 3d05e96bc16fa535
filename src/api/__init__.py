"""FastAPI application module for ShopCatalog.

This module contains the FastAPI application, route handlers, and API
endpoints for the catalog service: product listings, filter facets, product
detail and similar-product recommendations.
"""
