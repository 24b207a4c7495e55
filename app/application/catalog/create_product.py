"""
Use case: Create a catalog product.

Input: CreateProductCommand
Output: Product
Side effects: Adds the product to the repository.
Failure cases: None beyond request validation done at the interface layer.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from app.application.catalog.dtos import CreateProductCommand
from app.domain.catalog.entities import Product
from app.domain.catalog.ports import ProductRepository

logger = logging.getLogger(__name__)


class CreateProductUseCase:
    """Assigns a fresh UUID and timestamps, then stores the product."""

    def __init__(
        self,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._product_repo = product_repo
        self._clock = clock

    def execute(self, command: CreateProductCommand) -> Product:
        """Create and store a product.

        Args:
            command: Validated product fields.

        Returns:
            The stored product.
        """
        now = self._clock()
        product = Product(
            id=str(uuid.uuid4()),
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            in_stock=command.in_stock,
            created_at=now,
            updated_at=now,
        )
        self._product_repo.add(product)
        logger.info("Created product id=%s category=%s", product.id, product.category)
        return product
