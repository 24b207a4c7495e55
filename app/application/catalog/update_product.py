"""
Use case: Partially update a catalog product.

Input: UpdateProductCommand
Output: Product
Side effects: Replaces the stored product.
Failure cases: ValidationError (malformed id or unknown attribute), NotFoundError.
"""

import dataclasses
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from app.application.catalog.dtos import UpdateProductCommand
from app.domain.catalog.entities import Product
from app.domain.catalog.errors import NotFoundError, ValidationError
from app.domain.catalog.ports import ProductRepository
from app.domain.catalog.query import validate_product_id

UPDATABLE_ATTRIBUTES = frozenset({"name", "description", "price", "category", "in_stock"})

logger = logging.getLogger(__name__)


class UpdateProductUseCase:
    """Applies the provided changes and refreshes ``updated_at``.

    The id and creation timestamp are never changed.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._product_repo = product_repo
        self._clock = clock

    def execute(self, command: UpdateProductCommand) -> Product:
        """Update a product.

        Args:
            command: Target id and the attributes to change.

        Returns:
            The updated product.

        Raises:
            ValidationError: If the id is malformed or a change targets a
                read-only attribute.
            NotFoundError: If no product has that id.
        """
        validate_product_id(command.product_id)
        illegal = sorted(set(command.changes) - UPDATABLE_ATTRIBUTES)
        if illegal:
            raise ValidationError(
                "Product update validation failed",
                [f"Field cannot be updated: {name}" for name in illegal],
            )

        current = self._product_repo.get_by_id(command.product_id)
        if current is None:
            raise NotFoundError("Product", command.product_id)

        updated = dataclasses.replace(current, **command.changes, updated_at=self._clock())
        if self._product_repo.replace(updated) is None:
            # Deleted between the read and the write.
            raise NotFoundError("Product", command.product_id)

        logger.info(
            "Updated product id=%s fields=%s",
            updated.id,
            ",".join(sorted(command.changes)),
        )
        return updated
