"""
Use case: Compute catalog statistics.

Input: raw query-string mapping (category, detailed, format)
Output: ProductStatsResult
Side effects: None.
Failure cases: ValidationError for invalid statistics options.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from app.application.catalog.dtos import ProductStatsResult
from app.domain.catalog.entities import FilterSet
from app.domain.catalog.ports import ProductRepository
from app.domain.catalog.query import RawQuery, apply_filters, parse_stats_query
from app.domain.catalog.stats import calculate_overview, calculate_product_stats

logger = logging.getLogger(__name__)


class GetProductStatsUseCase:
    """Validates statistics options and computes them over a snapshot.

    Statistics never fail on empty input; only option validation can.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._product_repo = product_repo
        self._clock = clock

    def execute(self, raw_query: RawQuery) -> ProductStatsResult:
        """Run the statistics use case.

        Args:
            raw_query: Query-string keys mapped to a string or list of strings.

        Returns:
            The overview, plus every view unless only a summary was requested.

        Raises:
            ValidationError: On unknown parameters or invalid values.
        """
        query = parse_stats_query(raw_query)
        products = apply_filters(
            self._product_repo.snapshot(), FilterSet(categories=query.categories)
        )
        logger.debug(
            "Computing stats: products=%d categories=%s summary_only=%s",
            len(products),
            query.categories,
            query.summary_only,
        )

        if query.summary_only:
            return ProductStatsResult(
                query=query,
                total_products=len(products),
                overview=calculate_overview(products),
            )

        stats = calculate_product_stats(
            products,
            include_products=query.detailed,
            categories=query.categories or (),
            now=self._clock(),
        )
        return ProductStatsResult(
            query=query,
            total_products=len(products),
            overview=stats.overview,
            stats=stats,
        )
