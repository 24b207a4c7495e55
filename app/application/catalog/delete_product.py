"""
Use case: Delete a catalog product.

Input: product id
Output: the deleted Product
Side effects: Removes the product from the repository.
Failure cases: ValidationError (malformed id), NotFoundError.
"""

import logging

from app.domain.catalog.entities import Product
from app.domain.catalog.errors import NotFoundError
from app.domain.catalog.ports import ProductRepository
from app.domain.catalog.query import validate_product_id

logger = logging.getLogger(__name__)


class DeleteProductUseCase:
    """Removes one product and returns it."""

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def execute(self, product_id: str) -> Product:
        validate_product_id(product_id)
        removed = self._product_repo.delete(product_id)
        if removed is None:
            raise NotFoundError("Product", product_id)
        logger.info("Deleted product id=%s", product_id)
        return removed
