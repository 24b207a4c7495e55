"""
Pydantic schemas for catalog API request/response validation.

These schemas enforce input validation and define the API contract.
Field names are snake_case in Python and camelCase on the wire.
No business logic belongs here.
"""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    StrictBool,
    ValidationInfo,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from app.domain.catalog.entities import (
    CATEGORIES,
    DESCRIPTION_MAX_LENGTH,
    MAX_PRICE,
    MIN_PRICE,
    NAME_MAX_LENGTH,
)


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, readable from domain dataclasses."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _normalize_category(value: str | None) -> str | None:
    if value is None:
        return None
    category = value.strip().lower()
    if category not in CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(CATEGORIES)}")
    return category


def _omit_absent(
    model: BaseModel, data: dict[str, Any], names: tuple[str, ...]
) -> dict[str, Any]:
    """Drop keys for optional parts that were not computed."""
    for name in names:
        if getattr(model, name) is None:
            data.pop(name, None)
            data.pop(to_camel(name), None)
    return data


# ------------------------------------------------------------------
# Requests
# ------------------------------------------------------------------


class CreateProductRequest(CamelModel):
    """Request schema for creating a product.

    Attributes:
        name: Display name (1-100 chars, trimmed).
        description: Description (1-500 chars, trimmed).
        price: Unit price (0.01-999999).
        category: One of the catalog categories, case-insensitive.
        in_stock: Availability; must be a JSON boolean.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    price: float = Field(..., ge=MIN_PRICE, le=MAX_PRICE)
    category: str
    in_stock: StrictBool

    @field_validator("category")
    @classmethod
    def check_category(cls, value: str) -> str:
        return _normalize_category(value)


class UpdateProductRequest(CamelModel):
    """Request schema for a partial product update.

    Omitted fields are kept. A field that is present must carry a value;
    an explicit null is rejected.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(
        default=None, min_length=1, max_length=DESCRIPTION_MAX_LENGTH
    )
    price: float | None = Field(default=None, ge=MIN_PRICE, le=MAX_PRICE)
    category: str | None = None
    in_stock: StrictBool | None = None

    @field_validator("name", "description", "price", "category", "in_stock", mode="before")
    @classmethod
    def reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            raise ValueError(f"{info.field_name} must not be null")
        return value

    @field_validator("category")
    @classmethod
    def check_category(cls, value: str | None) -> str | None:
        return _normalize_category(value)


# ------------------------------------------------------------------
# Products
# ------------------------------------------------------------------


class ProductSchema(CamelModel):
    """A product as returned by the API."""

    id: str
    name: str
    description: str
    price: float
    category: str
    in_stock: bool
    created_at: datetime
    updated_at: datetime


class EnvelopeSchema(CamelModel):
    """Fields shared by every success response."""

    success: bool = True
    message: str
    request_id: str
    path: str
    method: str
    timestamp: datetime


class ProductResponse(EnvelopeSchema):
    """Response schema for single-product endpoints."""

    data: ProductSchema


class PaginationSchema(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


class PriceRangeSchema(CamelModel):
    min: float | None = None
    max: float | None = None


class AppliedFiltersSchema(CamelModel):
    category: list[str] | None = None
    price: PriceRangeSchema | None = None
    in_stock: bool | None = None


class AvailableFiltersSchema(CamelModel):
    categories: list[str]
    price_range: PriceRangeSchema
    stock_status: list[bool]


class FiltersMetaSchema(CamelModel):
    applied: AppliedFiltersSchema
    available: AvailableFiltersSchema


class SearchMetaSchema(CamelModel):
    term: str
    fields: list[str]
    results_found: int


class SortingMetaSchema(CamelModel):
    field: str
    order: str
    available_fields: list[str]


class ProductListMetaSchema(CamelModel):
    pagination: PaginationSchema
    filters: FiltersMetaSchema
    search: SearchMetaSchema | None
    sorting: SortingMetaSchema
    query: dict[str, str | list[str]]


class ProductListResponse(EnvelopeSchema):
    """Response schema for the product listing endpoint."""

    data: list[ProductSchema]
    meta: ProductListMetaSchema


# ------------------------------------------------------------------
# Statistics
# ------------------------------------------------------------------


class OverviewSchema(CamelModel):
    total_products: int
    in_stock_products: int
    out_of_stock_products: int
    stock_percentage: float
    total_value: float
    average_price: float
    unique_categories: int


class ProductSummarySchema(CamelModel):
    id: str
    name: str
    price: float
    in_stock: bool


class CategoryStatsSchema(CamelModel):
    count: int
    in_stock: int
    out_of_stock: int
    total_value: float
    average_price: float
    min_price: float
    max_price: float
    stock_percentage: float
    products: list[ProductSummarySchema] | None = None

    @model_serializer(mode="wrap")
    def omit_products(self, handler: SerializerFunctionWrapHandler):
        return _omit_absent(self, handler(self), ("products",))


class QuartilesSchema(CamelModel):
    q1: float
    q3: float


class DistributionBucketSchema(CamelModel):
    range: str
    min: float
    max: float
    count: int


class PricingSchema(CamelModel):
    min: float
    max: float
    average: float
    median: float
    quartiles: QuartilesSchema
    price_ranges: dict[str, int]
    distribution: list[DistributionBucketSchema]


class InventoryProductSchema(CamelModel):
    id: str
    name: str
    price: float
    category: str


class CategoryInventorySchema(CamelModel):
    in_stock: int
    out_of_stock: int
    total: int


class InventorySchema(CamelModel):
    total_products: int
    in_stock_count: int
    out_of_stock_count: int
    stock_percentage: float
    most_expensive_in_stock: InventoryProductSchema | None = None
    cheapest_in_stock: InventoryProductSchema | None = None
    by_category: dict[str, CategoryInventorySchema]


class CategoryCountSchema(CamelModel):
    category: str
    count: int


class PriceGrowthSchema(CamelModel):
    trend: str
    percentage: float
    period: str


class InventoryTurnoverSchema(CamelModel):
    rate: str
    description: str


class TrendsSchema(CamelModel):
    recently_added: int
    popular_categories: list[CategoryCountSchema]
    price_growth: PriceGrowthSchema
    inventory_turnover: InventoryTurnoverSchema


class StatsDataSchema(CamelModel):
    """Statistics views. Only the overview is present for summary requests."""

    overview: OverviewSchema
    by_category: dict[str, CategoryStatsSchema] | None = None
    pricing: PricingSchema | None = None
    inventory: InventorySchema | None = None
    trends: TrendsSchema | None = None

    @model_serializer(mode="wrap")
    def omit_sections(self, handler: SerializerFunctionWrapHandler):
        return _omit_absent(
            self, handler(self), ("by_category", "pricing", "inventory", "trends")
        )


class StatsMetaSchema(CamelModel):
    total_products: int
    generated_at: datetime
    data_source: str = "in-memory"
    format: str
    detailed: bool


class StatsResponse(EnvelopeSchema):
    """Response schema for the statistics endpoint."""

    data: StatsDataSchema
    meta: StatsMetaSchema


# ------------------------------------------------------------------
# Errors & health
# ------------------------------------------------------------------


class ErrorResponse(CamelModel):
    """Standard error response returned by all error handlers.

    Kind-specific fields (details, field, hints, suggestions, ...) are
    added alongside the shared ones.
    """

    model_config = ConfigDict(extra="allow")

    success: bool = False
    message: str
    error: str
    status_code: int
    timestamp: str
    request_id: str
    path: str
    method: str


class HealthResponse(CamelModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    environment: str
    uptime_seconds: float
    error_rate: float
    error_rate_threshold: float


class ErrorStatsResponse(CamelModel):
    """Response schema for the error metrics snapshot."""

    summary: dict[str, int]
    breakdown: dict[str, dict[str, int]]
    recent: list[dict[str, Any]]
    error_rates: dict[str, float]
    is_error_rate_high: bool
