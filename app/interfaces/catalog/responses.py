"""
Response builders for the catalog API.

Assemble the success envelope (data, metadata, message and request
context) from use case results. Pure mapping, no business logic.
"""

from datetime import datetime, timezone

from fastapi import Request

from app.application.catalog.dtos import ProductListResult, ProductStatsResult
from app.domain.catalog.entities import (
    CATEGORIES,
    MAX_PRICE,
    SORTABLE_FIELDS,
    FilterSet,
    Product,
)
from app.domain.catalog.query import RawQuery
from app.interfaces.catalog.schemas import (
    AppliedFiltersSchema,
    AvailableFiltersSchema,
    FiltersMetaSchema,
    OverviewSchema,
    PaginationSchema,
    PriceRangeSchema,
    ProductListMetaSchema,
    ProductListResponse,
    ProductResponse,
    ProductSchema,
    SearchMetaSchema,
    SortingMetaSchema,
    StatsDataSchema,
    StatsMetaSchema,
    StatsResponse,
)
from app.shared.request_context import get_request_id

AVAILABLE_FILTERS = AvailableFiltersSchema(
    categories=list(CATEGORIES),
    price_range=PriceRangeSchema(min=0, max=MAX_PRICE),
    stock_status=[True, False],
)


def _context(request: Request) -> dict:
    return {
        "request_id": get_request_id(request),
        "path": request.url.path,
        "method": request.method,
        "timestamp": datetime.now(timezone.utc),
    }


def _applied_filters(filters: FilterSet) -> AppliedFiltersSchema:
    return AppliedFiltersSchema(
        category=list(filters.categories) if filters.categories is not None else None,
        price=PriceRangeSchema.model_validate(filters.price) if filters.price else None,
        in_stock=filters.in_stock,
    )


def build_list_response(
    result: ProductListResult, raw_query: RawQuery, request: Request
) -> ProductListResponse:
    """Build the envelope for a product listing."""
    query, page = result.query, result.page
    search = None
    if query.search.term:
        search = SearchMetaSchema(
            term=query.search.term,
            fields=list(query.search.fields),
            results_found=len(page.items),
        )

    return ProductListResponse(
        data=[ProductSchema.model_validate(p) for p in page.items],
        meta=ProductListMetaSchema(
            pagination=PaginationSchema.model_validate(page.pagination),
            filters=FiltersMetaSchema(
                applied=_applied_filters(query.filters),
                available=AVAILABLE_FILTERS,
            ),
            search=search,
            sorting=SortingMetaSchema(
                field=query.sort.field,
                order=query.sort.order.value,
                available_fields=list(SORTABLE_FIELDS),
            ),
            query=dict(raw_query),
        ),
        message=f"Retrieved {len(page.items)} product(s) successfully",
        **_context(request),
    )


def build_item_response(product: Product, message: str, request: Request) -> ProductResponse:
    """Build the envelope for a single product."""
    return ProductResponse(
        data=ProductSchema.model_validate(product),
        message=message,
        **_context(request),
    )


def build_stats_response(result: ProductStatsResult, request: Request) -> StatsResponse:
    """Build the envelope for catalog statistics."""
    if result.stats is not None:
        data = StatsDataSchema.model_validate(result.stats)
    else:
        data = StatsDataSchema(overview=OverviewSchema.model_validate(result.overview))

    context = _context(request)
    return StatsResponse(
        data=data,
        meta=StatsMetaSchema(
            total_products=result.total_products,
            generated_at=context["timestamp"],
            format="summary" if result.query.summary_only else "json",
            detailed=result.query.detailed,
        ),
        message="Product statistics retrieved successfully",
        **context,
    )
