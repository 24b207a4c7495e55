"""
Adapter: In-memory product storage.

Implements the ProductRepository port with a process-local dict.
Sync FastAPI endpoints run in a threadpool, so every access goes through
a lock and reads hand out snapshot copies.
"""

import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

from app.domain.catalog.entities import Product
from app.domain.catalog.ports import ProductRepository

logger = logging.getLogger(__name__)


def demo_products(now: datetime | None = None) -> list[Product]:
    """Return the three demo products the catalog starts with."""
    now = now or datetime.now(timezone.utc)
    rows = [
        ("1", "Laptop", "High-performance laptop with 16GB RAM", 1200.0, "electronics", True),
        ("2", "Smartphone", "Latest model with 128GB storage", 800.0, "electronics", True),
        ("3", "Coffee Maker", "Programmable coffee maker with timer", 50.0, "kitchen", False),
    ]
    return [
        Product(
            id=product_id,
            name=name,
            description=description,
            price=price,
            category=category,
            in_stock=in_stock,
            created_at=now,
            updated_at=now,
        )
        for product_id, name, description, price, category, in_stock in rows
    ]


class InMemoryProductRepository(ProductRepository):
    """Thread-safe in-memory product store.

    Products are kept in insertion order. The stored values are frozen
    dataclasses, so handing out shallow copies of the collection is safe.
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._lock = threading.RLock()
        self._products: dict[str, Product] = {}
        for product in products:
            self.add(product)

    def snapshot(self) -> list[Product]:
        with self._lock:
            return list(self._products.values())

    def get_by_id(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def add(self, product: Product) -> Product:
        with self._lock:
            if product.id in self._products:
                raise ValueError(f"Duplicate product id: {product.id}")
            self._products[product.id] = product
        logger.debug("Stored product id=%s", product.id)
        return product

    def replace(self, product: Product) -> Optional[Product]:
        with self._lock:
            if product.id not in self._products:
                return None
            self._products[product.id] = product
        logger.debug("Replaced product id=%s", product.id)
        return product

    def delete(self, product_id: str) -> Optional[Product]:
        with self._lock:
            removed = self._products.pop(product_id, None)
        if removed is not None:
            logger.debug("Deleted product id=%s", product_id)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)
