"""
Use case: List catalog products with filtering, search, sorting and paging.

Input: raw query-string mapping
Output: ProductListResult
Side effects: None (read-only query).
Failure cases: ValidationError for any invalid query parameter.
"""

import logging

from app.application.catalog.dtos import ProductListResult
from app.domain.catalog.ports import ProductRepository
from app.domain.catalog.query import RawQuery, execute_query, parse_product_query

logger = logging.getLogger(__name__)


class ListProductsUseCase:
    """Orchestrates a product listing.

    Parses the raw query first so invalid input fails before any data is
    touched, then runs the query pipeline over a repository snapshot.
    """

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def execute(self, raw_query: RawQuery) -> ProductListResult:
        """Run the listing use case.

        Args:
            raw_query: Query-string keys mapped to a string or list of strings.

        Returns:
            The validated query and the resulting page.

        Raises:
            ValidationError: If any parameter is invalid.
        """
        query = parse_product_query(raw_query)
        logger.debug(
            "Listing products: pagination=%s filters=%s search=%s sort=%s",
            query.pagination,
            query.filters,
            query.search,
            query.sort,
        )

        page = execute_query(self._product_repo.snapshot(), query)
        return ProductListResult(query=query, page=page)
