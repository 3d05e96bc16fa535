"""Tests for the FastAPI application endpoints.

This module contains integration tests for the ShopCatalog API endpoints,
including health checks, listing, facets, product detail and
recommendation endpoints.
"""


def test_ping_endpoint(api_client):
    """Test that the /ping endpoint returns correct status and JSON."""
    response = api_client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_status_endpoint(api_client):
    """Test that the /status endpoint returns snapshot status information."""
    response = api_client.get("/status")

    assert response.status_code == 200
    data = response.json()

    assert data["snapshot_loaded"] is True
    assert data["num_products"] == 8
    assert isinstance(data["timestamp_last_loaded"], str)


def test_list_products_response_shape(api_client):
    """Test that /api/products returns products and both counts."""
    response = api_client.get("/api/products")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"

    data = body["data"]
    assert data["total"] == 8
    assert data["overallTotal"] == 8
    assert data["totalPages"] == 1
    assert len(data["products"]) == 8

    product = data["products"][0]
    for field in (
        "id",
        "product_name",
        "price",
        "discount_price",
        "category_name",
        "brand_name",
        "pictures",
        "default_picture",
        "hover_picture",
        "sizes",
    ):
        assert field in product


def test_list_products_with_filters(api_client):
    response = api_client.get(
        "/api/products",
        params={
            "category": "Violins",
            "brand": "Yamaha",
            "minPrice": "1000",
            "maxPrice": "3500",
            "sort": "priceDesc",
        },
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["id"] for p in data["products"]] == [3, 2]
    assert data["total"] == 2
    assert data["overallTotal"] == 8


def test_list_products_pagination(api_client):
    response = api_client.get("/api/products", params={"page": 2, "limit": 3})

    data = response.json()["data"]
    assert [p["id"] for p in data["products"]] == [4, 5, 6]
    assert data["totalPages"] == 3


def test_list_products_search(api_client):
    response = api_client.get("/api/products", params={"search": "STENTOR"})
    assert [p["id"] for p in response.json()["data"]["products"]] == [5, 7]


def test_list_products_ignores_malformed_price(api_client):
    response = api_client.get("/api/products", params={"minPrice": "abc", "maxPrice": ""})

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 8


def test_list_products_ignores_inverted_range(api_client):
    response = api_client.get("/api/products", params={"minPrice": 3000, "maxPrice": 100})

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 8


def test_list_products_unknown_sort(api_client):
    response = api_client.get("/api/products", params={"sort": "bestselling"})

    assert response.status_code == 200
    ids = [p["id"] for p in response.json()["data"]["products"]]
    assert ids == sorted(ids)


def test_categories_and_brands(api_client):
    response = api_client.get("/api/products/categories-and-brands")

    assert response.status_code == 200
    data = response.json()["data"]
    assert {"name": "Cases", "count": 0} in data["categories"]
    assert {"name": "Yamaha", "count": 4} in data["brands"]
    assert data["priceRange"] == {"min_price": 50, "max_price": 4000}


def test_product_detail(api_client):
    response = api_client.get("/api/products/1")

    assert response.status_code == 200
    product = response.json()["data"]
    assert product["id"] == 1
    assert product["discount_price"] == 800.0
    assert product["default_picture"] == "001-1.jpg"
    assert product["sizes"] == [{"size": "1/2", "stock": 3}, {"size": "4/4", "stock": 0}]


def test_recommend_endpoint(api_client):
    response = api_client.get("/api/products/recommend/1")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    ids = [p["id"] for p in body["data"]]
    assert len(ids) == 4
    assert 1 not in ids
    assert set(ids[:3]) == {2, 3, 4}


def test_recommend_endpoint_empty(api_client):
    response = api_client.get("/api/products/recommend/8")

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_metrics_endpoint_counts_operations(api_client):
    api_client.get("/api/products")
    api_client.get("/api/products")
    api_client.get("/api/products/recommend/1")

    response = api_client.get("/metrics")

    assert response.status_code == 200
    data = response.json()
    assert data["query_catalog"]["count"] == 2
    assert data["query_catalog"]["errors"] == 0
    assert data["recommend_similar_products"]["count"] == 1


def test_request_id_header(api_client):
    response = api_client.get("/ping", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"

    response = api_client.get("/ping")
    assert response.headers["X-Request-ID"]
