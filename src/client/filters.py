"""Client-side filter state for the catalog listing.

The FilterStateNormalizer owns the user's current selection and keeps the
price slider, the absolute price inputs and the outbound request consistent.
It never emits an inverted or out-of-range price range: every path into the
state is clamped before a CatalogRequest is built.

Commits (and therefore requests) happen only on discrete events: a slider
release, a typed price, a filter click, or the end of the search debounce
window. Dragging a slider handle only moves local display state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from src.catalog.models import CatalogRequest, SortKey
from src.catalog.utils import parse_number, round_half_up
from src.client.debounce import Debouncer
from src.config import DEFAULT_PAGE_SIZE, DEFAULT_SEARCH_DEBOUNCE_MS, FALLBACK_PRICE_CEILING

# Configure module logger
logger = logging.getLogger(__name__)

SLIDER_MIN = 0.0
SLIDER_MAX = 100.0
# Handles and prices always stay at least this far apart
MIN_SEPARATION = 1


@dataclass(frozen=True)
class PriceBounds:
    """Catalog-wide effective price extremes, fixed for one session."""

    catalog_min: float
    catalog_max: float

    @property
    def span(self) -> float:
        return self.catalog_max - self.catalog_min

    @property
    def is_degenerate(self) -> bool:
        return self.span <= 0

    def to_percent(self, price: float) -> float:
        if self.is_degenerate:
            return SLIDER_MIN
        return (price - self.catalog_min) / self.span * 100


@dataclass
class FilterState:
    """The committed filter selection sent to the server."""

    category: Optional[str] = None
    brand: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: str = ""
    sort: SortKey = SortKey.DEFAULT
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class FilterStateNormalizer:
    """Keeps slider position, price bounds and filter request consistent.

    Args:
        on_commit: Called with the canonical CatalogRequest after every
            committed change, once price bounds are known.
        page_size: Products per page.
        search_delay: Quiet period, in seconds, before search text commits.
    """

    def __init__(
        self,
        on_commit: Optional[Callable[[CatalogRequest], Any]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        search_delay: float = DEFAULT_SEARCH_DEBOUNCE_MS / 1000,
    ):
        self.on_commit = on_commit
        self.page_size = page_size
        self.state = FilterState(page_size=page_size)
        self.bounds: Optional[PriceBounds] = None

        # Local UI state, not sent until committed
        self.search_input = ""
        self.min_percent = SLIDER_MIN
        self.max_percent = SLIDER_MAX
        self.display_min_price: Optional[float] = None
        self.display_max_price: Optional[float] = None

        self._search_debouncer = Debouncer(search_delay, self._commit_search)

    @property
    def ready(self) -> bool:
        return self.bounds is not None

    @property
    def has_active_filters(self) -> bool:
        """True when a category, brand or narrowed price range is selected."""
        if self.state.category or self.state.brand:
            return True
        if self.bounds is None:
            return False
        return (
            self.state.min_price != self.bounds.catalog_min
            or self.state.max_price != self.bounds.catalog_max
        )

    def set_price_bounds_from_server(self, min_price: Any, max_price: Any) -> Optional[CatalogRequest]:
        """Seed the price bounds once from the facets endpoint.

        Non-numeric or inverted bounds are replaced by (0, 1_000_000) and
        logged. A zero-width range is widened by one unit so the two price
        handles can stay apart.
        """
        low = parse_number(min_price)
        high = parse_number(max_price)

        if low is None or high is None or low > high:
            logger.warning(
                "Invalid price bounds from server, using fallback range",
                extra={"min_price": str(min_price), "max_price": str(max_price)},
            )
            low, high = 0.0, float(FALLBACK_PRICE_CEILING)
        elif high - low < MIN_SEPARATION:
            logger.warning(
                "Price bounds narrower than one unit, widening",
                extra={"min_price": low, "max_price": high},
            )
            high = low + MIN_SEPARATION

        self.bounds = PriceBounds(catalog_min=low, catalog_max=high)
        self._set_prices(low, high)
        self.min_percent = SLIDER_MIN
        self.max_percent = SLIDER_MAX
        self.state.page = 1
        return self._emit()

    def percent_to_price(self, percent: float) -> float:
        """Map a slider percentage to an absolute price, rounded half up."""
        if self.bounds is None:
            raise RuntimeError("Price bounds have not been set")
        if self.bounds.catalog_max <= self.bounds.catalog_min:
            return self.bounds.catalog_min
        return round_half_up(self.bounds.catalog_min + self.bounds.span * percent / 100)

    def drag_min(self, percent: Any) -> None:
        """Move the lower handle; nothing is committed until release()."""
        value = _clamp(parse_number(percent, SLIDER_MIN), SLIDER_MIN, SLIDER_MAX)
        self.min_percent = min(value, self.max_percent - MIN_SEPARATION)
        if self.ready:
            self.display_min_price = self.percent_to_price(self.min_percent)

    def drag_max(self, percent: Any) -> None:
        """Move the upper handle; nothing is committed until release()."""
        value = _clamp(parse_number(percent, SLIDER_MAX), SLIDER_MIN, SLIDER_MAX)
        self.max_percent = max(value, self.min_percent + MIN_SEPARATION)
        if self.ready:
            self.display_max_price = self.percent_to_price(self.max_percent)

    def release(self) -> Optional[CatalogRequest]:
        """Commit the slider position (mouse-up or touch-end)."""
        if self.bounds is None:
            return None

        low = max(self.bounds.catalog_min, self.percent_to_price(self.min_percent))
        high = min(self.bounds.catalog_max, self.percent_to_price(self.max_percent))
        self._set_prices(*self._separate(low, high))
        self.state.page = 1
        return self._emit()

    def set_price_by_number_input(self, value: Any, which: str) -> Optional[CatalogRequest]:
        """Commit a typed min or max price.

        The value is clamped to the catalog bounds and kept at least one
        unit away from the other bound; the matching slider handle follows.
        """
        if which not in ("min", "max"):
            raise ValueError(f"which must be 'min' or 'max', got {which!r}")
        if self.bounds is None:
            logger.warning("Typed price ignored before price bounds are known")
            return None
        if self.bounds.is_degenerate:
            logger.error("Typed price ignored, catalog price range is empty")
            return None

        number = parse_number(value, 0.0)

        if which == "min":
            price = max(number, self.bounds.catalog_min)
            price = min(price, self.state.max_price - MIN_SEPARATION)
            self.state.min_price = self.display_min_price = price
            self.min_percent = _clamp(
                self.bounds.to_percent(price), SLIDER_MIN, self.max_percent - MIN_SEPARATION
            )
        else:
            price = min(number, self.bounds.catalog_max)
            price = max(price, self.state.min_price + MIN_SEPARATION)
            self.state.max_price = self.display_max_price = price
            self.max_percent = _clamp(
                self.bounds.to_percent(price), self.min_percent + MIN_SEPARATION, SLIDER_MAX
            )

        self.state.page = 1
        return self._emit()

    def set_search_text(self, text: str) -> None:
        """Store raw search input and restart the debounce timer."""
        self.search_input = text or ""
        self._search_debouncer.trigger(self.search_input)

    def flush_search(self) -> None:
        """Commit pending search text immediately (e.g. on Enter)."""
        self._search_debouncer.flush()

    def set_category(self, category: Optional[str]) -> Optional[CatalogRequest]:
        self.state.category = category or None
        self.state.page = 1
        return self._emit()

    def set_brand(self, brand: Optional[str]) -> Optional[CatalogRequest]:
        self.state.brand = brand or None
        self.state.page = 1
        return self._emit()

    def set_sort(self, sort: Any) -> Optional[CatalogRequest]:
        self.state.sort = SortKey.parse(sort)
        self.state.page = 1
        return self._emit()

    def set_page(self, page: Any) -> Optional[CatalogRequest]:
        """Change page only; every other filter is kept."""
        self.state.page = max(1, int(parse_number(page, 1)))
        return self._emit()

    def clear_all(self) -> Optional[CatalogRequest]:
        """Reset category, brand and price range in one commit."""
        self.state.category = None
        self.state.brand = None
        if self.bounds is not None:
            self._set_prices(self.bounds.catalog_min, self.bounds.catalog_max)
        self.min_percent = SLIDER_MIN
        self.max_percent = SLIDER_MAX
        self.state.page = 1
        return self._emit()

    def reset(self) -> None:
        """Forget the whole session state (navigation away from the listing)."""
        self._search_debouncer.cancel()
        self.state = FilterState(page_size=self.page_size)
        self.bounds = None
        self.search_input = ""
        self.min_percent = SLIDER_MIN
        self.max_percent = SLIDER_MAX
        self.display_min_price = None
        self.display_max_price = None

    def canonical_request(self) -> CatalogRequest:
        """The fully normalized request for the committed state."""
        return CatalogRequest(
            page=self.state.page,
            limit=self.state.page_size,
            search=self.state.search,
            category=self.state.category,
            brand=self.state.brand,
            sort=self.state.sort,
            min_price=self.state.min_price,
            max_price=self.state.max_price,
        )

    def _commit_search(self, text: str) -> None:
        self.state.search = text.strip()
        self.state.page = 1
        self._emit()

    def _separate(self, low: float, high: float):
        if high - low >= MIN_SEPARATION:
            return low, high
        high = min(self.bounds.catalog_max, low + MIN_SEPARATION)
        low = high - MIN_SEPARATION
        return low, high

    def _set_prices(self, low: float, high: float) -> None:
        self.state.min_price = self.display_min_price = low
        self.state.max_price = self.display_max_price = high

    def _emit(self) -> Optional[CatalogRequest]:
        if self.bounds is None:
            return None
        request = self.canonical_request()
        logger.debug("Filter commit", extra={"request": request.to_query_params()})
        if self.on_commit is not None:
            self.on_commit(request)
        return request
