"""
Domain entities for the catalog bounded context.

Entities represent core business objects with identity and lifecycle.
Query value objects describe a validated listing request.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Category(str, Enum):
    """Fixed set of product categories."""

    ELECTRONICS = "electronics"
    KITCHEN = "kitchen"
    CLOTHING = "clothing"
    BOOKS = "books"
    SPORTS = "sports"
    TOYS = "toys"
    OTHER = "other"


CATEGORIES: tuple[str, ...] = tuple(c.value for c in Category)

MIN_PRICE = 0.01
MAX_PRICE = 999999.0
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


# Public (camelCase) product field names mapped to entity attributes.
PRODUCT_FIELDS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "description": "description",
    "price": "price",
    "category": "category",
    "inStock": "in_stock",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

SORTABLE_FIELDS: tuple[str, ...] = (
    "name",
    "price",
    "category",
    "inStock",
    "createdAt",
    "updatedAt",
)


@dataclass(frozen=True)
class Product:
    """A catalog product.

    The id never changes once assigned. Updates produce a new instance
    with a refreshed ``updated_at``.
    """

    id: str
    name: str
    description: str
    price: float
    category: str
    in_stock: bool
    created_at: datetime
    updated_at: datetime

    def field_value(self, public_name: str) -> object | None:
        """Return the value of a public (camelCase) field, or None if unknown."""
        attribute = PRODUCT_FIELDS.get(public_name)
        if attribute is None:
            return None
        return getattr(self, attribute)


@dataclass(frozen=True)
class Pagination:
    """Validated page request. ``skip`` and ``offset`` are the same value."""

    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def offset(self) -> int:
        return self.skip


@dataclass(frozen=True)
class PriceRange:
    """Inclusive price bounds. A missing bound is unconstrained."""

    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class FilterSet:
    """Validated filters. Absent members impose no constraint."""

    categories: tuple[str, ...] | None = None
    price: PriceRange | None = None
    in_stock: bool | None = None

    @property
    def is_empty(self) -> bool:
        return self.categories is None and self.price is None and self.in_stock is None


DEFAULT_SEARCH_FIELDS: tuple[str, ...] = ("name", "description")


@dataclass(frozen=True)
class SearchSpec:
    """Normalized search term and the fields it scans. No term means no-op."""

    term: str | None = None
    fields: tuple[str, ...] = DEFAULT_SEARCH_FIELDS


@dataclass(frozen=True)
class SortSpec:
    """Sort field (public name) and direction."""

    field: str = "createdAt"
    order: SortOrder = SortOrder.DESC


@dataclass(frozen=True)
class ProductQuery:
    """A fully validated listing request."""

    pagination: Pagination
    filters: FilterSet = field(default_factory=FilterSet)
    search: SearchSpec = field(default_factory=SearchSpec)
    sort: SortSpec = field(default_factory=SortSpec)


@dataclass(frozen=True)
class PaginationMeta:
    """Pagination metadata describing a page of results."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


@dataclass(frozen=True)
class PageResult:
    """One page of products plus its metadata."""

    items: list[Product]
    pagination: PaginationMeta


@dataclass(frozen=True)
class StatsQuery:
    """Validated options for the statistics endpoint."""

    categories: tuple[str, ...] | None = None
    detailed: bool = True
    summary_only: bool = False
