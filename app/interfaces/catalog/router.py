"""
FastAPI router for the catalog bounded context.

All routes delegate to use cases. No business logic here.
Request bodies are validated by Pydantic schemas; query strings are
validated by the query processor inside the use cases.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Request

from app.application.catalog.create_product import CreateProductUseCase
from app.application.catalog.delete_product import DeleteProductUseCase
from app.application.catalog.dtos import CreateProductCommand, UpdateProductCommand
from app.application.catalog.get_product import GetProductUseCase
from app.application.catalog.get_product_stats import GetProductStatsUseCase
from app.application.catalog.list_products import ListProductsUseCase
from app.application.catalog.update_product import UpdateProductUseCase
from app.core.config import settings
from app.domain.catalog.query import RawQuery
from app.interfaces.catalog.dependencies import (
    get_create_product_use_case,
    get_delete_product_use_case,
    get_list_products_use_case,
    get_product_stats_use_case,
    get_product_use_case,
    get_raw_query,
    get_update_product_use_case,
)
from app.interfaces.catalog.responses import (
    build_item_response,
    build_list_response,
    build_stats_response,
)
from app.interfaces.catalog.schemas import (
    CreateProductRequest,
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
    StatsResponse,
    UpdateProductRequest,
)
from app.shared.security.auth import authenticate, require_permission
from app.shared.security.rate_limiting import limiter

AUTH_ERRORS = {401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}
QUERY_ERRORS = {400: {"model": ErrorResponse}, **AUTH_ERRORS}
ITEM_ERRORS = {404: {"model": ErrorResponse}, **QUERY_ERRORS}

router = APIRouter(
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(authenticate)],
)


@router.get(
    "",
    response_model=ProductListResponse,
    responses=QUERY_ERRORS,
    summary="List products",
    description=(
        "Filter (category, minPrice, maxPrice, inStock), search (q, fields), "
        "sort (sortBy, sortOrder) and paginate (page, limit) the catalog."
    ),
)
def list_products(
    request: Request,
    raw_query: RawQuery = Depends(get_raw_query),
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),
) -> ProductListResponse:
    """List products matching the query string."""
    result = use_case.execute(raw_query)
    return build_list_response(result, raw_query, request)


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses=QUERY_ERRORS,
    summary="Catalog statistics",
    description=(
        "Overview, per-category, pricing, inventory and trend statistics. "
        "Options: category, format (json|summary), detailed (true|false)."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
def get_product_stats(
    request: Request,
    raw_query: RawQuery = Depends(get_raw_query),
    use_case: GetProductStatsUseCase = Depends(get_product_stats_use_case),
) -> StatsResponse:
    """Compute catalog statistics."""
    result = use_case.execute(raw_query)
    return build_stats_response(result, request)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=ITEM_ERRORS,
    summary="Get a product",
)
def get_product(
    product_id: str,
    request: Request,
    use_case: GetProductUseCase = Depends(get_product_use_case),
) -> ProductResponse:
    """Return a single product by id."""
    product = use_case.execute(product_id)
    return build_item_response(product, "Product retrieved successfully", request)


@router.post(
    "",
    status_code=201,
    response_model=ProductResponse,
    responses=QUERY_ERRORS,
    dependencies=[Depends(require_permission("write"))],
    summary="Create a product",
)
def create_product(
    body: CreateProductRequest,
    request: Request,
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),
) -> ProductResponse:
    """Create a product. Requires the write permission."""
    command = CreateProductCommand(
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        in_stock=body.in_stock,
    )
    product = use_case.execute(command)
    return build_item_response(product, "Product created successfully", request)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses=ITEM_ERRORS,
    dependencies=[Depends(require_permission("write"))],
    summary="Update a product",
)
def update_product(
    product_id: str,
    body: UpdateProductRequest,
    request: Request,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),
) -> ProductResponse:
    """Partially update a product. Requires the write permission."""
    command = UpdateProductCommand(
        product_id=product_id,
        changes=body.model_dump(exclude_unset=True),
    )
    product = use_case.execute(command)
    return build_item_response(product, "Product updated successfully", request)


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    responses=ITEM_ERRORS,
    dependencies=[Depends(require_permission("delete"))],
    summary="Delete a product",
)
def delete_product(
    product_id: str,
    request: Request,
    use_case: DeleteProductUseCase = Depends(get_delete_product_use_case),
) -> ProductResponse:
    """Delete a product. Requires the delete permission."""
    product = use_case.execute(product_id)
    return build_item_response(product, "Product deleted successfully", request)
