"""
Dependency injection for the catalog bounded context.

Provides FastAPI dependency functions that wire the application's
repository and error metrics (held on ``app.state``) into use cases via
constructor injection.
"""

from fastapi import Depends, Request

from app.application.catalog.create_product import CreateProductUseCase
from app.application.catalog.delete_product import DeleteProductUseCase
from app.application.catalog.get_product import GetProductUseCase
from app.application.catalog.get_product_stats import GetProductStatsUseCase
from app.application.catalog.list_products import ListProductsUseCase
from app.application.catalog.update_product import UpdateProductUseCase
from app.domain.catalog.ports import ProductRepository
from app.domain.catalog.query import RawQuery
from app.shared.observability.error_metrics import ErrorMetrics


def get_product_repository(request: Request) -> ProductRepository:
    """Return the application's product repository."""
    return request.app.state.product_repository


def get_error_metrics(request: Request) -> ErrorMetrics:
    """Return the application's error metrics recorder."""
    return request.app.state.error_metrics


def get_raw_query(request: Request) -> RawQuery:
    """Return the query string as a mapping; repeated keys become lists."""
    params = request.query_params
    raw: dict[str, str | list[str]] = {}
    for key in params.keys():
        values = params.getlist(key)
        raw[key] = values[0] if len(values) == 1 else values
    return raw


def get_list_products_use_case(
    repo: ProductRepository = Depends(get_product_repository),
) -> ListProductsUseCase:
    """Build ListProductsUseCase with its infrastructure dependencies."""
    return ListProductsUseCase(product_repo=repo)


def get_product_use_case(
    repo: ProductRepository = Depends(get_product_repository),
) -> GetProductUseCase:
    """Build GetProductUseCase with its infrastructure dependencies."""
    return GetProductUseCase(product_repo=repo)


def get_create_product_use_case(
    repo: ProductRepository = Depends(get_product_repository),
) -> CreateProductUseCase:
    """Build CreateProductUseCase with its infrastructure dependencies."""
    return CreateProductUseCase(product_repo=repo)


def get_update_product_use_case(
    repo: ProductRepository = Depends(get_product_repository),
) -> UpdateProductUseCase:
    """Build UpdateProductUseCase with its infrastructure dependencies."""
    return UpdateProductUseCase(product_repo=repo)


def get_delete_product_use_case(
    repo: ProductRepository = Depends(get_product_repository),
) -> DeleteProductUseCase:
    """Build DeleteProductUseCase with its infrastructure dependencies."""
    return DeleteProductUseCase(product_repo=repo)


def get_product_stats_use_case(
    repo: ProductRepository = Depends(get_product_repository),
) -> GetProductStatsUseCase:
    """Build GetProductStatsUseCase with its infrastructure dependencies."""
    return GetProductStatsUseCase(product_repo=repo)
