"""
Use case: Retrieve a single product by id.

Input: product id
Output: Product
Side effects: None.
Failure cases: ValidationError (malformed id), NotFoundError.
"""

from app.domain.catalog.entities import Product
from app.domain.catalog.errors import NotFoundError
from app.domain.catalog.ports import ProductRepository
from app.domain.catalog.query import validate_product_id


class GetProductUseCase:
    """Looks up one product, raising NotFoundError when it is missing."""

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def execute(self, product_id: str) -> Product:
        validate_product_id(product_id)
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product
