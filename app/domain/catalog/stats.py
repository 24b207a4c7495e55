"""
Domain service: Aggregate statistics over a product collection.

Computes five independent views (overview, per-category, pricing,
inventory, trends). Pure functions of their input: no shared state,
no IO, never fail on empty input (zeros are substituted).

Trends are best-effort placeholders, not a time-series analysis.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from app.domain.catalog.entities import Product

RECENT_WINDOW = timedelta(days=30)
POPULAR_CATEGORIES_LIMIT = 5

PRICE_BUCKETS: tuple[tuple[str, float, float], ...] = (
    ("under-25", 0.0, 25.0),
    ("25-50", 25.0, 50.0),
    ("50-100", 50.0, 100.0),
    ("100-500", 100.0, 500.0),
    ("500-1000", 500.0, 1000.0),
    ("over-1000", 1000.0, math.inf),
)


@dataclass(frozen=True)
class Overview:
    total_products: int
    in_stock_products: int
    out_of_stock_products: int
    stock_percentage: float
    total_value: float
    average_price: float
    unique_categories: int


@dataclass(frozen=True)
class ProductSummary:
    id: str
    name: str
    price: float
    in_stock: bool


@dataclass(frozen=True)
class CategoryStats:
    count: int
    in_stock: int
    out_of_stock: int
    total_value: float
    average_price: float
    min_price: float
    max_price: float
    stock_percentage: float
    products: list[ProductSummary] | None = None


@dataclass(frozen=True)
class Quartiles:
    q1: float
    q3: float


@dataclass(frozen=True)
class DistributionBucket:
    range: str
    min: float
    max: float
    count: int


@dataclass(frozen=True)
class PricingStats:
    min: float
    max: float
    average: float
    median: float
    quartiles: Quartiles
    price_ranges: dict[str, int]
    distribution: list[DistributionBucket]


@dataclass(frozen=True)
class InventoryProduct:
    id: str
    name: str
    price: float
    category: str


@dataclass(frozen=True)
class CategoryInventory:
    in_stock: int
    out_of_stock: int
    total: int


@dataclass(frozen=True)
class InventoryStats:
    total_products: int
    in_stock_count: int
    out_of_stock_count: int
    stock_percentage: float
    most_expensive_in_stock: InventoryProduct | None
    cheapest_in_stock: InventoryProduct | None
    by_category: dict[str, CategoryInventory]


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int


@dataclass(frozen=True)
class PriceGrowth:
    trend: str = "stable"
    percentage: float = 0.0
    period: str = "30 days"


@dataclass(frozen=True)
class InventoryTurnover:
    rate: str = "normal"
    description: str = "Based on stock levels and category distribution"


@dataclass(frozen=True)
class TrendStats:
    recently_added: int
    popular_categories: list[CategoryCount]
    price_growth: PriceGrowth = field(default_factory=PriceGrowth)
    inventory_turnover: InventoryTurnover = field(default_factory=InventoryTurnover)


@dataclass(frozen=True)
class ProductStats:
    overview: Overview
    by_category: dict[str, CategoryStats]
    pricing: PricingStats
    inventory: InventoryStats
    trends: TrendStats


def _round2(value: float) -> float:
    return round(value, 2)


def _percentage(part: int, total: int) -> float:
    return _round2(part / total * 100) if total else 0.0


def calculate_overview(products: Sequence[Product]) -> Overview:
    """Counts, stock percentage, total/average price and category count."""
    total = len(products)
    in_stock = sum(1 for p in products if p.in_stock)
    total_value = sum(p.price for p in products)
    return Overview(
        total_products=total,
        in_stock_products=in_stock,
        out_of_stock_products=total - in_stock,
        stock_percentage=_percentage(in_stock, total),
        total_value=_round2(total_value),
        average_price=_round2(total_value / total) if total else 0.0,
        unique_categories=len({p.category for p in products}),
    )


class _CategoryAccumulator:
    """Running totals for one category; min/max stay None until a price is seen."""

    def __init__(self) -> None:
        self.count = 0
        self.in_stock = 0
        self.total_value = 0.0
        self.min_price: float | None = None
        self.max_price: float | None = None
        self.products: list[ProductSummary] = []

    def add(self, product: Product) -> None:
        self.count += 1
        self.in_stock += 1 if product.in_stock else 0
        self.total_value += product.price
        if self.min_price is None or product.price < self.min_price:
            self.min_price = product.price
        if self.max_price is None or product.price > self.max_price:
            self.max_price = product.price
        self.products.append(
            ProductSummary(
                id=product.id,
                name=product.name,
                price=product.price,
                in_stock=product.in_stock,
            )
        )

    def finalize(self, include_products: bool) -> CategoryStats:
        return CategoryStats(
            count=self.count,
            in_stock=self.in_stock,
            out_of_stock=self.count - self.in_stock,
            total_value=_round2(self.total_value),
            average_price=_round2(self.total_value / self.count) if self.count else 0.0,
            min_price=self.min_price if self.min_price is not None else 0.0,
            max_price=self.max_price if self.max_price is not None else 0.0,
            stock_percentage=_percentage(self.in_stock, self.count),
            products=list(self.products) if include_products else None,
        )


def calculate_category_stats(
    products: Sequence[Product],
    include_products: bool = True,
    categories: Sequence[str] = (),
) -> dict[str, CategoryStats]:
    """Per-category breakdown, keyed by category in first-seen order.

    Args:
        products: Products to aggregate.
        include_products: Embed lightweight product summaries.
        categories: Categories to report even when they have no members.
    """
    accumulators: dict[str, _CategoryAccumulator] = {
        category: _CategoryAccumulator() for category in categories
    }
    for product in products:
        accumulators.setdefault(product.category, _CategoryAccumulator()).add(product)
    return {
        category: acc.finalize(include_products) for category, acc in accumulators.items()
    }


def _median(sorted_prices: Sequence[float]) -> float:
    n = len(sorted_prices)
    middle = n // 2
    if n % 2 == 0:
        return (sorted_prices[middle - 1] + sorted_prices[middle]) / 2
    return sorted_prices[middle]


def calculate_pricing_stats(products: Sequence[Product]) -> PricingStats:
    """Min/max/average/median, quartiles, quartile report and histogram."""
    prices = sorted(p.price for p in products)
    price_ranges = {
        label: sum(1 for price in prices if low <= price < high)
        for label, low, high in PRICE_BUCKETS
    }
    if not prices:
        return PricingStats(
            min=0.0,
            max=0.0,
            average=0.0,
            median=0.0,
            quartiles=Quartiles(q1=0.0, q3=0.0),
            price_ranges=price_ranges,
            distribution=[],
        )

    n = len(prices)
    low, high = prices[0], prices[-1]
    median = _median(prices)
    half_index = math.floor(n * 0.5)
    q1_index = math.floor(n * 0.25)
    q3_index = math.floor(n * 0.75)
    q1, q3 = prices[q1_index], prices[q3_index]

    return PricingStats(
        min=_round2(low),
        max=_round2(high),
        average=_round2(sum(prices) / n),
        median=_round2(median),
        quartiles=Quartiles(q1=_round2(q1), q3=_round2(q3)),
        price_ranges=price_ranges,
        distribution=[
            DistributionBucket("Q1 (0-25%)", low, q1, q1_index + 1),
            DistributionBucket("Q2 (25-50%)", q1, median, half_index - q1_index),
            DistributionBucket("Q3 (50-75%)", median, q3, q3_index - half_index),
            DistributionBucket("Q4 (75-100%)", q3, high, n - q3_index),
        ],
    )


def _inventory_product(product: Product | None) -> InventoryProduct | None:
    if product is None:
        return None
    return InventoryProduct(
        id=product.id, name=product.name, price=product.price, category=product.category
    )


def calculate_inventory_stats(products: Sequence[Product]) -> InventoryStats:
    """Stock counts, extreme in-stock products and per-category stock."""
    in_stock = [p for p in products if p.in_stock]

    most_expensive = cheapest = None
    if in_stock:
        highest = max(p.price for p in in_stock)
        lowest = min(p.price for p in in_stock)
        # First match wins on ties.
        most_expensive = next(p for p in in_stock if p.price == highest)
        cheapest = next(p for p in in_stock if p.price == lowest)

    counts: dict[str, list[int]] = {}
    for product in products:
        bucket = counts.setdefault(product.category, [0, 0])
        bucket[0 if product.in_stock else 1] += 1

    return InventoryStats(
        total_products=len(products),
        in_stock_count=len(in_stock),
        out_of_stock_count=len(products) - len(in_stock),
        stock_percentage=_percentage(len(in_stock), len(products)),
        most_expensive_in_stock=_inventory_product(most_expensive),
        cheapest_in_stock=_inventory_product(cheapest),
        by_category={
            category: CategoryInventory(in_stock=ins, out_of_stock=outs, total=ins + outs)
            for category, (ins, outs) in counts.items()
        },
    )


def popular_categories(products: Sequence[Product]) -> list[CategoryCount]:
    """Top categories by product count; ties keep first-seen order."""
    counts: dict[str, int] = {}
    for product in products:
        counts[product.category] = counts.get(product.category, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryCount(category=category, count=count)
        for category, count in ranked[:POPULAR_CATEGORIES_LIMIT]
    ]


def calculate_trends(products: Sequence[Product], now: datetime | None = None) -> TrendStats:
    """Count products created in the last 30 days; the rest is placeholder."""
    now = now or datetime.now(timezone.utc)
    recent = sum(1 for p in products if now - p.created_at <= RECENT_WINDOW)
    return TrendStats(
        recently_added=recent,
        popular_categories=popular_categories(products),
    )


def calculate_product_stats(
    products: Sequence[Product],
    include_products: bool = True,
    categories: Sequence[str] = (),
    now: datetime | None = None,
) -> ProductStats:
    """Compute every statistics view over the same product snapshot.

    Categories listed in ``categories`` appear in the per-category view
    even when no product belongs to them.
    """
    return ProductStats(
        overview=calculate_overview(products),
        by_category=calculate_category_stats(products, include_products, categories),
        pricing=calculate_pricing_stats(products),
        inventory=calculate_inventory_stats(products),
        trends=calculate_trends(products, now),
    )
