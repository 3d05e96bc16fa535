"""Catalog browsing session: filter state wired to the catalog API.

Every committed filter change issues a listing request tagged with a
monotonically increasing sequence number. Responses and failures are applied
only when they belong to the latest request, so an older response that
arrives late can never overwrite a newer listing.
"""

import asyncio
import logging
from typing import List, Optional, Set

from src.catalog.models import CatalogFacets, CatalogRequest, Product
from src.client.api_client import CatalogApiClient, CatalogClientError
from src.client.filters import FilterStateNormalizer
from src.config import get_settings

# Configure module logger
logger = logging.getLogger(__name__)


class CatalogSession:
    """Visible listing state for one browsing session.

    Attributes:
        loading: True while the latest request is in flight.
        error: Message of the latest failed request, if any.
        products, total, overall_total, total_pages: Latest applied listing.
    """

    def __init__(
        self,
        client: CatalogApiClient,
        page_size: Optional[int] = None,
        search_delay: Optional[float] = None,
    ):
        settings = get_settings()
        self.client = client
        self.filters = FilterStateNormalizer(
            on_commit=self._on_commit,
            page_size=page_size or settings.page_size,
            search_delay=(
                search_delay if search_delay is not None else settings.search_debounce_ms / 1000
            ),
        )

        self.facets: Optional[CatalogFacets] = None
        self.loading = False
        self.error: Optional[str] = None
        self.products: List[Product] = []
        self.total = 0
        self.overall_total = 0
        self.total_pages = 0
        self.applied_request: Optional[CatalogRequest] = None

        self._sequence = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    async def start(self) -> bool:
        """Fetch facets, seed price bounds and issue the first listing.

        Returns:
            False if the facets could not be loaded; ``error`` is set.
        """
        self.loading = True
        self.error = None
        try:
            facets = await self.client.fetch_facets()
        except CatalogClientError as e:
            logger.error(f"Failed to load catalog facets: {e.message}")
            self.loading = False
            self.error = e.message
            return False

        self.facets = facets
        self.filters.set_price_bounds_from_server(
            facets.price_range.min_price, facets.price_range.max_price
        )
        return True

    async def wait_idle(self) -> None:
        """Wait for every in-flight listing request to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """End the session: drop pending work and reset filters."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()
        self.filters.reset()
        self.loading = False

    def _on_commit(self, request: CatalogRequest) -> None:
        self._sequence += 1
        sequence = self._sequence
        self.loading = True

        task = asyncio.get_running_loop().create_task(self._fetch(sequence, request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _apply_failure(self, sequence: int, message: str, retryable: bool) -> None:
        if sequence != self._sequence:
            logger.info(
                "Ignoring failure of superseded request",
                extra={"sequence": sequence, "latest": self._sequence},
            )
            return
        logger.error(
            "Catalog listing request failed",
            extra={"sequence": sequence, "error": message, "retryable": retryable},
        )
        self.error = message
        self.loading = False

    async def _fetch(self, sequence: int, request: CatalogRequest) -> None:
        try:
            page = await self.client.fetch_products(request)
        except CatalogClientError as e:
            self._apply_failure(sequence, e.message, e.retryable)
            return
        except Exception as e:
            # Runs as a task, so anything left uncaught would go unobserved
            logger.error("Unexpected error fetching catalog listing", exc_info=True)
            self._apply_failure(sequence, f"Catalog request failed: {e}", False)
            return

        if sequence != self._sequence:
            logger.debug(
                "Discarding stale listing response",
                extra={"sequence": sequence, "latest": self._sequence},
            )
            return

        self.products = page.products
        self.total = page.total
        self.overall_total = page.overall_total
        self.total_pages = page.total_pages
        self.applied_request = request
        self.error = None
        self.loading = False
