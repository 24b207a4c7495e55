"""
Port interfaces (ABCs) for the catalog bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.catalog.entities import Product


class ProductRepository(ABC):
    """Port for storing and retrieving catalog products."""

    @abstractmethod
    def snapshot(self) -> list[Product]:
        """Return a copy of every product, in insertion order.

        Callers may reorder or slice the returned list freely; the stored
        collection is never affected.
        """
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Return a product by its id, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def add(self, product: Product) -> Product:
        """Store a new product.

        Raises:
            ValueError: If a product with the same id already exists.
        """
        raise NotImplementedError

    @abstractmethod
    def replace(self, product: Product) -> Optional[Product]:
        """Replace the stored product with the same id.

        Returns:
            The stored product, or None if no product has that id.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, product_id: str) -> Optional[Product]:
        """Remove a product, returning it, or None if not found."""
        raise NotImplementedError
