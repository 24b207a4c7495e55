"""
Domain service: Query processing for product listings.

Turns raw query-string input into validated value objects and applies
them as pure transformations over a product sequence.
No framework imports. No IO. Inputs are never mutated.

Pipeline order is fixed: filter -> search -> sort -> paginate.
Pagination must see the final filtered, ordered set so its metadata
reflects the true result size.
"""

import math
import re
import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime

from app.domain.catalog.entities import (
    CATEGORIES,
    SORTABLE_FIELDS,
    FilterSet,
    PageResult,
    Pagination,
    PaginationMeta,
    PriceRange,
    Product,
    ProductQuery,
    SearchSpec,
    SortOrder,
    SortSpec,
    StatsQuery,
)
from app.domain.catalog.errors import ValidationError

RawQuery = Mapping[str, str | list[str]]

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
SEARCH_MIN_LENGTH = 2
SEARCH_MAX_LENGTH = 100

STATS_PARAMS = ("category", "detailed", "format")
STATS_FORMATS = ("json", "summary")
BOOLEAN_LITERALS = ("true", "false")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEGACY_ID = re.compile(r"^\d+$")


def _first(raw: RawQuery, key: str) -> str | None:
    """Return the scalar value of a key; lists contribute their first element."""
    value = raw.get(key)
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _present(value: str | None) -> bool:
    return value is not None and value != ""


def _leading_int(value: str | None) -> int | None:
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _invalid(context: str, detail: str, field: str) -> ValidationError:
    return ValidationError(f"{context}: {detail}", [detail], field)


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------


def parse_pagination(raw: RawQuery) -> Pagination:
    """Parse page/limit.

    Non-numeric values fall back to the defaults (page 1, limit 10).
    Numeric values out of range are errors.

    Raises:
        ValidationError: If page < 1 or limit is outside 1-100.
    """
    page = _leading_int(_first(raw, "page"))
    limit = _leading_int(_first(raw, "limit"))
    if page is None:
        page = DEFAULT_PAGE
    if limit is None:
        limit = DEFAULT_LIMIT

    if page < 1:
        raise _invalid("Pagination error", "Page number must be greater than 0", "page")
    if limit < 1 or limit > MAX_LIMIT:
        raise _invalid(
            "Pagination error", f"Limit must be between 1 and {MAX_LIMIT}", "limit"
        )
    return Pagination(page=page, limit=limit)


def parse_categories(raw: RawQuery, context: str = "Filter error") -> tuple[str, ...] | None:
    """Parse and case-fold the ``category`` parameter (single value or list)."""
    value = raw.get("category")
    if value is None or value == "":
        return None
    values = value if isinstance(value, list) else [value]
    categories = tuple(v.lower() for v in values)

    invalid = [c for c in categories if c not in CATEGORIES]
    if invalid:
        raise _invalid(
            context,
            f"Invalid categories: {', '.join(invalid)}. "
            f"Valid categories: {', '.join(CATEGORIES)}",
            "category",
        )
    return categories


def _parse_price_bound(raw: RawQuery, key: str) -> float | None:
    value = _first(raw, key)
    if not _present(value):
        return None
    try:
        bound = float(value.strip())
    except ValueError:
        bound = math.nan
    if not math.isfinite(bound) or bound < 0:
        raise _invalid("Filter error", f"{key} must be a valid non-negative number", key)
    return bound


def parse_filters(raw: RawQuery) -> FilterSet:
    """Parse category, price range and stock filters.

    Raises:
        ValidationError: On unknown categories, bad price bounds,
            min > max, or an inStock value other than "true"/"false".
    """
    categories = parse_categories(raw)

    price = None
    min_price = _parse_price_bound(raw, "minPrice")
    max_price = _parse_price_bound(raw, "maxPrice")
    if min_price is not None or max_price is not None:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise _invalid("Filter error", "minPrice cannot be greater than maxPrice", "price")
        price = PriceRange(min=min_price, max=max_price)

    in_stock = None
    raw_in_stock = _first(raw, "inStock")
    if raw_in_stock is not None:
        if raw_in_stock not in BOOLEAN_LITERALS:
            raise _invalid("Filter error", 'inStock must be "true" or "false"', "inStock")
        in_stock = raw_in_stock == "true"

    return FilterSet(categories=categories, price=price, in_stock=in_stock)


def parse_search(raw: RawQuery) -> SearchSpec:
    """Parse the search term (``q`` takes precedence over ``search``).

    Raises:
        ValidationError: If the trimmed term is shorter than 2 or longer
            than 100 characters.
    """
    term = _first(raw, "q")
    if not _present(term):
        term = _first(raw, "search")
    if not _present(term):
        return SearchSpec()

    term = term.strip()
    if len(term) < SEARCH_MIN_LENGTH:
        raise _invalid(
            "Search error",
            f"Search term must be at least {SEARCH_MIN_LENGTH} characters long",
            "q",
        )
    if len(term) > SEARCH_MAX_LENGTH:
        raise _invalid(
            "Search error",
            f"Search term must be at most {SEARCH_MAX_LENGTH} characters long",
            "q",
        )

    fields = _first(raw, "fields")
    if _present(fields):
        # Unknown names are tolerated; they simply never match.
        names = tuple(f.strip() for f in fields.split(",") if f.strip())
        return SearchSpec(term=term.lower(), fields=names)
    return SearchSpec(term=term.lower())


def parse_sorting(raw: RawQuery) -> SortSpec:
    """Parse sortBy/sortOrder. Defaults to createdAt descending.

    Raises:
        ValidationError: If sortBy names a field that cannot be sorted on.
    """
    sort_by = _first(raw, "sortBy")
    if not _present(sort_by):
        return SortSpec()

    if sort_by not in SORTABLE_FIELDS:
        raise _invalid(
            "Sorting error",
            f"Invalid sortBy field. Valid fields: {', '.join(SORTABLE_FIELDS)}",
            "sortBy",
        )
    order = SortOrder.DESC if _first(raw, "sortOrder") == "desc" else SortOrder.ASC
    return SortSpec(field=sort_by, order=order)


def parse_product_query(raw: RawQuery) -> ProductQuery:
    """Parse every listing parameter, failing on the first invalid one."""
    return ProductQuery(
        pagination=parse_pagination(raw),
        filters=parse_filters(raw),
        search=parse_search(raw),
        sort=parse_sorting(raw),
    )


def parse_stats_query(raw: RawQuery) -> StatsQuery:
    """Parse options for the statistics endpoint.

    Raises:
        ValidationError: On unknown parameters or invalid values.
    """
    context = "Stats query error"
    unknown = [key for key in raw if key not in STATS_PARAMS]
    if unknown:
        raise _invalid(
            context,
            f"Invalid parameters: {', '.join(unknown)}. Allowed: {', '.join(STATS_PARAMS)}",
            "query",
        )

    detailed = _first(raw, "detailed")
    if _present(detailed) and detailed not in BOOLEAN_LITERALS:
        raise _invalid(context, 'detailed parameter must be "true" or "false"', "detailed")

    output_format = _first(raw, "format")
    if _present(output_format) and output_format not in STATS_FORMATS:
        raise _invalid(context, 'format parameter must be "json" or "summary"', "format")

    return StatsQuery(
        categories=parse_categories(raw, context),
        detailed=detailed != "false",
        summary_only=output_format == "summary",
    )


def validate_product_id(product_id: str) -> str:
    """Accept UUIDs and legacy all-digit ids.

    Raises:
        ValidationError: If the id is blank or malformed.
    """
    if not product_id or not product_id.strip():
        raise ValidationError(
            "Product ID is required and must be a valid string",
            ["Product ID parameter is missing or invalid"],
            "id",
        )
    if _LEGACY_ID.match(product_id):
        return product_id
    try:
        uuid.UUID(product_id)
    except ValueError:
        raise ValidationError(
            "Product ID must be a valid UUID format or legacy ID",
            ["ID must be a valid UUID or a numeric legacy ID"],
            "id",
        ) from None
    return product_id


# ------------------------------------------------------------------
# Transformations
# ------------------------------------------------------------------


def apply_filters(products: Sequence[Product], filters: FilterSet) -> list[Product]:
    """Keep products matching every active filter, preserving order."""

    def matches(product: Product) -> bool:
        if filters.categories is not None and product.category not in filters.categories:
            return False
        if filters.price is not None:
            if filters.price.min is not None and product.price < filters.price.min:
                return False
            if filters.price.max is not None and product.price > filters.price.max:
                return False
        if filters.in_stock is not None and product.in_stock != filters.in_stock:
            return False
        return True

    return [p for p in products if matches(p)]


def _stringify(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def apply_search(products: Sequence[Product], search: SearchSpec) -> list[Product]:
    """Keep products where any configured field contains the term."""
    if not search.term:
        return list(products)

    def matches(product: Product) -> bool:
        for name in search.fields:
            value = product.field_value(name)
            if value is not None and search.term in _stringify(value).lower():
                return True
        return False

    return [p for p in products if matches(p)]


def apply_sorting(products: Sequence[Product], sort: SortSpec) -> list[Product]:
    """Return a new list stably sorted on the sort field.

    Strings compare case-insensitively, other values natively.
    """

    def key(product: Product) -> object:
        value = product.field_value(sort.field)
        return value.lower() if isinstance(value, str) else value

    return sorted(products, key=key, reverse=sort.order is SortOrder.DESC)


def apply_pagination(products: Sequence[Product], pagination: Pagination) -> PageResult:
    """Slice one page out of the products. Out-of-range pages are empty."""
    total = len(products)
    start = pagination.skip
    end = start + pagination.limit
    return PageResult(
        items=list(products[start:end]),
        pagination=PaginationMeta(
            current_page=pagination.page,
            total_pages=math.ceil(total / pagination.limit),
            total_items=total,
            items_per_page=pagination.limit,
            has_next_page=end < total,
            has_prev_page=pagination.page > 1,
        ),
    )


def execute_query(products: Sequence[Product], query: ProductQuery) -> PageResult:
    """Run filter -> search -> sort -> paginate over the products."""
    filtered = apply_filters(products, query.filters)
    searched = apply_search(filtered, query.search)
    ordered = apply_sorting(searched, query.sort)
    return apply_pagination(ordered, query.pagination)
