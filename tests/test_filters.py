"""Tests for the client-side filter state normalizer."""

import random

import pytest

from src.catalog.models import SortKey
from src.client.filters import FilterStateNormalizer, PriceBounds


@pytest.fixture
def commits():
    return []


@pytest.fixture
def normalizer(commits):
    """Normalizer seeded with a 500..5000 catalog price range."""
    filters = FilterStateNormalizer(on_commit=commits.append, page_size=9)
    filters.set_price_bounds_from_server(500, 5000)
    commits.clear()
    return filters


EPSILON = 1e-9


def assert_price_invariants(filters):
    state, bounds = filters.state, filters.bounds
    assert bounds.catalog_min <= state.min_price
    assert state.min_price <= state.max_price - 1 + EPSILON
    assert state.max_price <= bounds.catalog_max
    assert 0 <= filters.min_percent <= filters.max_percent - 1 + EPSILON
    assert filters.max_percent <= 100


def test_no_commits_before_bounds_are_known():
    commits = []
    filters = FilterStateNormalizer(on_commit=commits.append)

    assert filters.set_category("Violins") is None
    assert filters.release() is None
    assert filters.set_price_by_number_input(100, "min") is None
    assert commits == []


def test_bounds_seed_full_range():
    commits = []
    filters = FilterStateNormalizer(on_commit=commits.append)
    request = filters.set_price_bounds_from_server(500, 5000)

    assert filters.ready
    assert request.min_price == 500
    assert request.max_price == 5000
    assert request.page == 1
    assert commits == [request]
    assert not filters.has_active_filters


@pytest.mark.parametrize(
    "low, high",
    [("abc", 100), (None, None), (5000, 500), (float("nan"), 10)],
)
def test_invalid_bounds_use_fallback(low, high):
    filters = FilterStateNormalizer()
    filters.set_price_bounds_from_server(low, high)

    assert filters.bounds == PriceBounds(0.0, 1_000_000.0)


def test_degenerate_bounds_are_widened():
    filters = FilterStateNormalizer()
    filters.set_price_bounds_from_server(700, 700)

    assert filters.bounds.catalog_min == 700
    assert filters.bounds.catalog_max == 701
    assert_price_invariants(filters)


def test_slider_drag_then_release(normalizer, commits):
    """Dragging to 20% / 60% of 500..5000 commits 1400..3200 on release."""
    normalizer.drag_min(20)
    normalizer.drag_max(60)

    assert commits == []
    assert normalizer.display_min_price == 1400
    assert normalizer.display_max_price == 3200

    request = normalizer.release()

    assert (request.min_price, request.max_price) == (1400, 3200)
    assert commits == [request]
    assert normalizer.has_active_filters


def test_slider_handles_cannot_cross(normalizer):
    normalizer.drag_max(60)
    normalizer.drag_min(80)

    assert normalizer.min_percent == 59
    normalizer.release()
    assert_price_invariants(normalizer)


def test_slider_clamps_out_of_range_percent(normalizer):
    normalizer.drag_min(-30)
    normalizer.drag_max(250)
    request = normalizer.release()

    assert (request.min_price, request.max_price) == (500, 5000)


def test_percent_to_price_rounds_half_up():
    filters = FilterStateNormalizer()
    filters.set_price_bounds_from_server(0, 5)

    assert filters.percent_to_price(50) == 3
    assert filters.percent_to_price(0) == 0
    assert filters.percent_to_price(100) == 5


@pytest.mark.parametrize(
    "value, which, expected",
    [
        (100, "min", (500, 5000)),
        (1400, "min", (1400, 5000)),
        (6000, "min", (4999, 5000)),
        ("abc", "min", (500, 5000)),
        (99999, "max", (500, 5000)),
        (3200, "max", (500, 3200)),
        (0, "max", (500, 501)),
    ],
)
def test_typed_price_is_clamped(normalizer, value, which, expected):
    request = normalizer.set_price_by_number_input(value, which)

    assert (request.min_price, request.max_price) == expected
    assert_price_invariants(normalizer)


def test_typed_price_moves_slider_handle(normalizer):
    normalizer.set_price_by_number_input(1400, "min")
    normalizer.set_price_by_number_input(3200, "max")

    assert normalizer.min_percent == pytest.approx(20)
    assert normalizer.max_percent == pytest.approx(60)


def test_typed_price_rejects_unknown_handle(normalizer):
    with pytest.raises(ValueError):
        normalizer.set_price_by_number_input(100, "middle")


def test_filter_change_resets_page(normalizer):
    normalizer.set_page(3)
    request = normalizer.set_category("Violins")

    assert request.page == 1
    assert request.category == "Violins"


def test_page_change_keeps_filters(normalizer):
    normalizer.set_category("Violins")
    normalizer.set_brand("Yamaha")
    normalizer.set_sort("priceAsc")
    request = normalizer.set_page(4)

    assert request.page == 4
    assert request.category == "Violins"
    assert request.brand == "Yamaha"
    assert request.sort == SortKey.PRICE_ASC


def test_unknown_sort_falls_back(normalizer):
    assert normalizer.set_sort("random").sort == SortKey.DEFAULT


def test_clear_all_is_idempotent(normalizer, commits):
    normalizer.set_category("Violins")
    normalizer.set_brand("Yamaha")
    normalizer.drag_min(20)
    normalizer.release()

    first = normalizer.clear_all()
    second = normalizer.clear_all()

    assert first == second
    assert first.category is None
    assert first.brand is None
    assert (first.min_price, first.max_price) == (500, 5000)
    assert (normalizer.min_percent, normalizer.max_percent) == (0, 100)
    assert not normalizer.has_active_filters
    assert commits[-2:] == [first, second]


def test_clear_all_keeps_search_and_sort(normalizer):
    normalizer.state.search = "violin"
    normalizer.set_sort("priceDesc")

    request = normalizer.clear_all()

    assert request.search == "violin"
    assert request.sort == SortKey.PRICE_DESC


def test_reset_forgets_bounds(normalizer):
    normalizer.set_category("Violins")
    normalizer.reset()

    assert not normalizer.ready
    assert normalizer.state.category is None
    assert normalizer.set_category("Bows") is None


def test_price_invariants_hold_under_random_input(normalizer):
    rand = random.Random(7)
    operations = [
        lambda: normalizer.drag_min(rand.uniform(-20, 120)),
        lambda: normalizer.drag_max(rand.uniform(-20, 120)),
        normalizer.release,
        lambda: normalizer.set_price_by_number_input(rand.uniform(-1000, 7000), "min"),
        lambda: normalizer.set_price_by_number_input(rand.uniform(-1000, 7000), "max"),
        normalizer.clear_all,
    ]
    for _ in range(500):
        rand.choice(operations)()
        assert_price_invariants(normalizer)


def test_emitted_requests_are_never_inverted(normalizer, commits):
    rand = random.Random(11)
    for _ in range(200):
        normalizer.drag_min(rand.uniform(0, 100))
        normalizer.drag_max(rand.uniform(0, 100))
        normalizer.release()

    for request in commits:
        assert request.min_price is not None
        assert request.max_price is not None
        assert request.min_price < request.max_price
