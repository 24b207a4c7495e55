"""
Data Transfer Objects for the catalog application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Any

from app.domain.catalog.entities import PageResult, ProductQuery, StatsQuery
from app.domain.catalog.stats import Overview, ProductStats


@dataclass(frozen=True)
class CreateProductCommand:
    """Input DTO for creating a product.

    Attributes:
        name: Display name (already trimmed, 1-100 chars).
        description: Description (already trimmed, 1-500 chars).
        price: Unit price (0.01-999999).
        category: Lowercase category name.
        in_stock: Whether the product is available.
    """

    name: str
    description: str
    price: float
    category: str
    in_stock: bool


@dataclass(frozen=True)
class UpdateProductCommand:
    """Input DTO for a partial product update.

    Attributes:
        product_id: Id of the product to update.
        changes: Entity attribute names mapped to their new values.
            Only the attributes present are changed.
    """

    product_id: str
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProductListResult:
    """Output DTO for a product listing.

    Attributes:
        query: The validated query that produced the page.
        page: The page of products and its pagination metadata.
    """

    query: ProductQuery
    page: PageResult


@dataclass(frozen=True)
class ProductStatsResult:
    """Output DTO for catalog statistics.

    Attributes:
        query: The validated statistics options.
        total_products: Number of products the statistics cover.
        overview: Always present.
        stats: Every view, or None when only the summary was requested.
    """

    query: StatsQuery
    total_products: int
    overview: Overview
    stats: ProductStats | None = None
