"""FastAPI application main module.

This module defines the main FastAPI application instance and core API
endpoints for the ShopCatalog service. It wires the product routes, the
request logging middleware and the error handler, and serves as the entry
point for the API server.
"""

from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.exceptions import ShopCatalogException
from src.api.logging_config import RequestLoggingMiddleware
from src.api.metrics import metrics_service
from src.api.routes import products
from src.api.routes.products import get_catalog_store
from src.catalog.store import CatalogStore

# Create FastAPI application instance
app = FastAPI(
    title="ShopCatalog API",
    description="Storefront catalog query and recommendation service",
    version="0.1.0",
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(products.router)


@app.exception_handler(ShopCatalogException)
async def shop_catalog_exception_handler(
    request: Request, exc: ShopCatalogException
) -> JSONResponse:
    """Render catalog errors as ``{status: "error", message, ...}``."""
    headers = {"Retry-After": "1"} if exc.status_code == 503 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "message": exc.message,
            "error": type(exc).__name__,
            "details": exc.details,
        },
        headers=headers,
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/status")
def status(store: CatalogStore = Depends(get_catalog_store)) -> Dict[str, Any]:
    """Report whether a catalog snapshot is loaded and how large it is."""
    return store.status()


@app.get("/metrics")
def metrics() -> Dict[str, Any]:
    """Per-operation call counts and latency."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import sys
    from pathlib import Path

    import uvicorn

    # Add project root to Python path for imports
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))

    from src.api.logging_config import setup_logging
    from src.config import get_settings

    setup_logging(get_settings().log_level)

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
