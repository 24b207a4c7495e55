"""
Shared pytest fixtures.

The environment is set before the application is imported so that the
module-level settings and rate limiter pick it up.
"""

import itertools
import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.domain.catalog.entities import Product  # noqa: E402
from app.main import create_app  # noqa: E402

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

USER_KEY = "dev-key-12345"
ADMIN_KEY = "admin-key-abcdef"


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for timestamp-dependent assertions."""
    return NOW


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory for products with sensible defaults.

    Each product is created one minute before the previous one, so the
    default createdAt-descending order is the creation order.
    """
    counter = itertools.count(1)

    def _make(**overrides) -> Product:
        index = next(counter)
        created = NOW - timedelta(minutes=index)
        values = {
            "id": str(index),
            "name": f"Product {index}",
            "description": f"Description of product {index}",
            "price": 10.0,
            "category": "electronics",
            "in_stock": True,
            "created_at": created,
            "updated_at": created,
        }
        values.update(overrides)
        return Product(**values)

    return _make


@pytest.fixture
def demo_catalog(make_product) -> list[Product]:
    """The three demo products (Laptop, Smartphone, Coffee Maker)."""
    return [
        make_product(id="1", name="Laptop", price=1200.0, category="electronics"),
        make_product(id="2", name="Smartphone", price=800.0, category="electronics"),
        make_product(
            id="3",
            name="Coffee Maker",
            description="Programmable coffee maker with timer",
            price=50.0,
            category="kitchen",
            in_stock=False,
        ),
    ]


@pytest.fixture
def app() -> FastAPI:
    """A fresh application with its own repository and error metrics."""
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"X-API-Key": USER_KEY}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-API-Key": ADMIN_KEY}
