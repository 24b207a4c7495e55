"""
Tests for the catalog API endpoints.

Exercises the FastAPI routes end to end against a fresh application
seeded with the demo products: envelopes, query handling, CRUD,
statistics, authentication and error responses.
"""

import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.infrastructure.catalog.in_memory_product_repository import (
    InMemoryProductRepository,
)
from app.shared.security.rate_limiting import limiter

PRODUCTS = "/api/v1/products"

NEW_PRODUCT = {
    "name": "  Novel ",
    "description": "A long story",
    "price": 12.5,
    "category": "Books",
    "inStock": True,
}


class BrokenRepository(InMemoryProductRepository):
    """Repository whose reads fail unexpectedly."""

    def snapshot(self):
        raise RuntimeError("storage offline")


class TestAuthentication:
    """Tests for API key authentication."""

    def test_missing_key(self, client: TestClient) -> None:
        response = client.get(PRODUCTS)
        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "AUTHENTICATION_ERROR"
        assert body["reason"] == "MISSING_API_KEY"
        assert body["hints"]

    def test_invalid_key(self, client: TestClient) -> None:
        response = client.get(PRODUCTS, headers={"X-API-Key": "nope"})
        assert response.status_code == 401
        assert response.json()["reason"] == "INVALID_API_KEY"

    def test_bearer_token(self, client: TestClient) -> None:
        response = client.get(PRODUCTS, headers={"Authorization": "Bearer dev-key-12345"})
        assert response.status_code == 200


class TestListProducts:
    """Tests for GET /api/v1/products."""

    def test_default_listing(self, client: TestClient, user_headers) -> None:
        response = client.get(PRODUCTS, headers=user_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Retrieved 3 product(s) successfully"
        assert body["path"] == PRODUCTS
        assert body["method"] == "GET"
        assert body["requestId"] == response.headers["X-Request-ID"]
        assert [p["id"] for p in body["data"]] == ["1", "2", "3"]

        meta = body["meta"]
        assert meta["pagination"] == {
            "currentPage": 1,
            "totalPages": 1,
            "totalItems": 3,
            "itemsPerPage": 10,
            "hasNextPage": False,
            "hasPrevPage": False,
        }
        assert meta["sorting"]["field"] == "createdAt"
        assert meta["sorting"]["order"] == "desc"
        assert meta["search"] is None
        assert "electronics" in meta["filters"]["available"]["categories"]

    def test_products_are_camel_case(self, client: TestClient, user_headers) -> None:
        product = client.get(PRODUCTS, headers=user_headers).json()["data"][0]
        assert set(product) == {
            "id",
            "name",
            "description",
            "price",
            "category",
            "inStock",
            "createdAt",
            "updatedAt",
        }

    def test_filter_by_category(self, client: TestClient, user_headers) -> None:
        body = client.get(PRODUCTS, params={"category": "kitchen"}, headers=user_headers).json()
        assert [p["name"] for p in body["data"]] == ["Coffee Maker"]
        assert body["meta"]["filters"]["applied"]["category"] == ["kitchen"]
        assert body["meta"]["query"] == {"category": "kitchen"}

    def test_repeated_category(self, client: TestClient, user_headers) -> None:
        response = client.get(
            f"{PRODUCTS}?category=kitchen&category=electronics", headers=user_headers
        )
        assert response.json()["meta"]["pagination"]["totalItems"] == 3

    def test_sort_and_paginate(self, client: TestClient, user_headers) -> None:
        params = {"sortBy": "price", "sortOrder": "asc", "limit": "2"}
        body = client.get(PRODUCTS, params=params, headers=user_headers).json()
        assert [p["price"] for p in body["data"]] == [50.0, 800.0]
        assert body["meta"]["pagination"]["totalPages"] == 2
        assert body["meta"]["pagination"]["hasNextPage"] is True

    def test_search(self, client: TestClient, user_headers) -> None:
        body = client.get(PRODUCTS, params={"q": "LAP"}, headers=user_headers).json()
        assert [p["name"] for p in body["data"]] == ["Laptop"]
        assert body["meta"]["search"] == {
            "term": "lap",
            "fields": ["name", "description"],
            "resultsFound": 1,
        }

    def test_invalid_category(self, client: TestClient, user_headers) -> None:
        response = client.get(PRODUCTS, params={"category": "bogus"}, headers=user_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["field"] == "category"
        assert body["details"]
        assert body["path"] == PRODUCTS

    def test_page_zero_rejected(self, client: TestClient, user_headers) -> None:
        response = client.get(PRODUCTS, params={"page": "0"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["field"] == "page"


class TestGetProduct:
    """Tests for GET /api/v1/products/{id}."""

    def test_found(self, client: TestClient, user_headers) -> None:
        response = client.get(f"{PRODUCTS}/1", headers=user_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["data"]["name"] == "Laptop"
        assert body["data"]["inStock"] is True
        assert body["message"] == "Product retrieved successfully"

    def test_missing_product(self, client: TestClient, user_headers) -> None:
        missing = str(uuid.uuid4())
        response = client.get(f"{PRODUCTS}/{missing}", headers=user_headers)
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "RESOURCE_NOT_FOUND"
        assert body["resource"] == "Product"
        assert body["resourceId"] == missing
        assert body["suggestions"]

    def test_malformed_id(self, client: TestClient, user_headers) -> None:
        response = client.get(f"{PRODUCTS}/not-an-id", headers=user_headers)
        assert response.status_code == 400
        assert response.json()["field"] == "id"


class TestCreateProduct:
    """Tests for POST /api/v1/products."""

    def test_create(self, client: TestClient, user_headers) -> None:
        response = client.post(PRODUCTS, json=NEW_PRODUCT, headers=user_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        uuid.UUID(data["id"])
        assert data["name"] == "Novel"
        assert data["category"] == "books"

        fetched = client.get(f"{PRODUCTS}/{data['id']}", headers=user_headers)
        assert fetched.json()["data"] == data

    @pytest.mark.parametrize(
        "changes, field",
        [
            ({"price": 0}, "price"),
            ({"price": 1_000_000}, "price"),
            ({"name": "   "}, "name"),
            ({"category": "food"}, "category"),
            ({"inStock": "yes"}, "inStock"),
        ],
    )
    def test_invalid_body(self, client: TestClient, user_headers, changes, field) -> None:
        response = client.post(PRODUCTS, json={**NEW_PRODUCT, **changes}, headers=user_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["field"] == field

    def test_missing_field(self, client: TestClient, user_headers) -> None:
        body = {k: v for k, v in NEW_PRODUCT.items() if k != "price"}
        response = client.post(PRODUCTS, json=body, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["field"] == "price"

    def test_unknown_field(self, client: TestClient, user_headers) -> None:
        response = client.post(
            PRODUCTS, json={**NEW_PRODUCT, "id": "1"}, headers=user_headers
        )
        assert response.status_code == 400

    def test_invalid_json(self, client: TestClient, user_headers) -> None:
        response = client.post(
            PRODUCTS,
            content="{bad json",
            headers={**user_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid JSON format"
        assert body["field"] == "body"


class TestUpdateProduct:
    """Tests for PUT /api/v1/products/{id}."""

    def test_partial_update(self, client: TestClient, user_headers) -> None:
        before = client.get(f"{PRODUCTS}/1", headers=user_headers).json()["data"]
        response = client.put(f"{PRODUCTS}/1", json={"price": 999.99}, headers=user_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["price"] == 999.99
        assert data["name"] == before["name"]
        assert data["createdAt"] == before["createdAt"]
        assert response.json()["message"] == "Product updated successfully"

    def test_missing_product(self, client: TestClient, user_headers) -> None:
        response = client.put(
            f"{PRODUCTS}/{uuid.uuid4()}", json={"price": 5}, headers=user_headers
        )
        assert response.status_code == 404

    def test_invalid_category(self, client: TestClient, user_headers) -> None:
        response = client.put(f"{PRODUCTS}/1", json={"category": "food"}, headers=user_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("field", ["name", "description", "price", "category", "inStock"])
    def test_null_value_rejected(self, client: TestClient, user_headers, field) -> None:
        response = client.put(f"{PRODUCTS}/1", json={field: None}, headers=user_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["field"] == field

        unchanged = client.get(f"{PRODUCTS}/1", headers=user_headers).json()["data"]
        assert unchanged["name"] == "Laptop"
        assert unchanged["updatedAt"] == unchanged["createdAt"]


class TestDeleteProduct:
    """Tests for DELETE /api/v1/products/{id}."""

    def test_user_cannot_delete(self, client: TestClient, user_headers) -> None:
        response = client.delete(f"{PRODUCTS}/1", headers=user_headers)
        assert response.status_code == 403
        body = response.json()
        assert body["error"] == "AUTHORIZATION_ERROR"
        assert body["requiredPermission"] == "delete"

    def test_admin_deletes(self, client: TestClient, admin_headers) -> None:
        response = client.delete(f"{PRODUCTS}/1", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Laptop"
        assert client.get(f"{PRODUCTS}/1", headers=admin_headers).status_code == 404


class TestProductStats:
    """Tests for GET /api/v1/products/stats."""

    def test_full_stats(self, client: TestClient, user_headers) -> None:
        response = client.get(f"{PRODUCTS}/stats", headers=user_headers)
        assert response.status_code == 200
        body = response.json()
        data = body["data"]
        assert set(data) == {"overview", "byCategory", "pricing", "inventory", "trends"}
        assert data["overview"]["totalProducts"] == 3
        assert data["byCategory"]["electronics"]["count"] == 2
        assert len(data["byCategory"]["electronics"]["products"]) == 2
        assert data["pricing"]["median"] == 800.0
        assert data["inventory"]["mostExpensiveInStock"]["id"] == "1"
        assert body["meta"]["dataSource"] == "in-memory"
        assert body["meta"]["format"] == "json"

    def test_summary_format(self, client: TestClient, user_headers) -> None:
        body = client.get(
            f"{PRODUCTS}/stats", params={"format": "summary"}, headers=user_headers
        ).json()
        assert set(body["data"]) == {"overview"}
        assert body["meta"]["format"] == "summary"

    def test_not_detailed(self, client: TestClient, user_headers) -> None:
        body = client.get(
            f"{PRODUCTS}/stats", params={"detailed": "false"}, headers=user_headers
        ).json()
        assert "products" not in body["data"]["byCategory"]["electronics"]

    def test_category(self, client: TestClient, user_headers) -> None:
        body = client.get(
            f"{PRODUCTS}/stats", params={"category": "kitchen"}, headers=user_headers
        ).json()
        assert body["meta"]["totalProducts"] == 1
        assert list(body["data"]["byCategory"]) == ["kitchen"]

    def test_unknown_parameter(self, client: TestClient, user_headers) -> None:
        response = client.get(f"{PRODUCTS}/stats", params={"page": "1"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["field"] == "query"

    def test_empty_catalog(self, app: FastAPI, client: TestClient, user_headers) -> None:
        app.state.product_repository = InMemoryProductRepository()
        data = client.get(f"{PRODUCTS}/stats", headers=user_headers).json()["data"]
        assert data["overview"]["totalProducts"] == 0
        assert data["pricing"]["distribution"] == []
        assert data["inventory"]["mostExpensiveInStock"] is None
        assert data["inventory"]["cheapestInStock"] is None


class TestErrorResponses:
    """Tests for framework-level errors and request context."""

    def test_unknown_route(self, client: TestClient, user_headers) -> None:
        response = client.get("/api/v1/nope", headers=user_headers)
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "RESOURCE_NOT_FOUND"
        assert body["resource"] == "Route"
        assert body["message"] == "Route not found: GET /api/v1/nope"

    def test_method_not_allowed(self, client: TestClient, user_headers) -> None:
        response = client.patch(f"{PRODUCTS}/1", json={}, headers=user_headers)
        assert response.status_code == 405
        assert response.json()["error"] == "METHOD_NOT_ALLOWED"

    def test_request_id_is_echoed(self, client: TestClient, user_headers) -> None:
        headers = {**user_headers, "X-Request-ID": "req-123"}
        ok = client.get(PRODUCTS, headers=headers)
        assert ok.headers["X-Request-ID"] == "req-123"
        assert ok.json()["requestId"] == "req-123"
        assert "X-Response-Time" in ok.headers

        failed = client.get(f"{PRODUCTS}/not-an-id", headers=headers)
        assert failed.headers["X-Request-ID"] == "req-123"
        assert failed.json()["requestId"] == "req-123"

    def test_unexpected_error_is_masked(
        self, app: FastAPI, client: TestClient, user_headers
    ) -> None:
        app.state.product_repository = BrokenRepository()
        response = client.get(PRODUCTS, headers=user_headers)
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "INTERNAL_ERROR"
        assert body["message"] == "Internal server error occurred"
        assert "stack" not in body
        assert "storage offline" not in response.text
        assert response.headers["X-Request-ID"] == body["requestId"]

    def test_errors_are_recorded(self, app: FastAPI, client: TestClient, user_headers) -> None:
        client.get(f"{PRODUCTS}/{uuid.uuid4()}", headers=user_headers)
        client.get(PRODUCTS)
        stats = app.state.error_metrics.get_stats()
        assert stats["summary"]["totalErrors"] == 2
        assert stats["breakdown"]["byStatusCode"] == {"404": 1, "401": 1}
        assert stats["recent"][-1]["endpoint"] == f"GET {PRODUCTS}"


class TestRateLimiting:
    """Tests for rate limiting behavior."""

    @pytest.fixture
    def enabled_limiter(self):
        limiter.reset()
        limiter.enabled = True
        yield limiter
        limiter.enabled = False
        limiter.reset()

    def test_stats_rate_limit_returns_429(
        self, enabled_limiter, client: TestClient, user_headers
    ) -> None:
        statuses = [
            client.get(f"{PRODUCTS}/stats", headers=user_headers).status_code
            for _ in range(11)
        ]
        assert statuses[:10] == [200] * 10
        assert statuses[10] == 429

    def test_429_uses_error_envelope(
        self, enabled_limiter, client: TestClient, user_headers
    ) -> None:
        for _ in range(10):
            client.get(f"{PRODUCTS}/stats", headers=user_headers)
        body = client.get(f"{PRODUCTS}/stats", headers=user_headers).json()
        assert body["success"] is False
        assert body["error"] == "RATE_LIMIT_EXCEEDED"
        assert body["statusCode"] == 429
