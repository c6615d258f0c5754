"""Query-string parsing for catalog listings.

Every helper here is forgiving: malformed input falls back to a default
("filter not applied") instead of raising.
"""
import math
import re

VALID_INCLUDES = ("images", "variants", "collection", "facets")

SORT_ORDERS = {
    "recommended": (("is_featured", "desc"), ("created_at", "desc")),
    "newest": (("created_at", "desc"),),
    "price_asc": (("price", "asc"),),
    "price_desc": (("price", "desc"),),
}
DEFAULT_SORT = "recommended"

DEFAULT_PAGE = 1
MAX_PAGE = 1000
DEFAULT_LIMIT = 24
MAX_LIMIT = 60

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class ProductFilters:
    """Typed filter record for product listing and facet queries."""

    __slots__ = (
        "collection",
        "collections",
        "q",
        "sort",
        "page",
        "limit",
        "sizes",
        "colors",
        "in_stock",
        "on_sale",
        "featured",
        "price_min",
        "price_max",
        "include",
    )

    def __init__(
        self,
        collection=None,
        collections=None,
        q=None,
        sort=DEFAULT_SORT,
        page=DEFAULT_PAGE,
        limit=DEFAULT_LIMIT,
        sizes=None,
        colors=None,
        in_stock=None,
        on_sale=None,
        featured=None,
        price_min=None,
        price_max=None,
        include=None,
    ):
        self.collection = collection
        self.collections = list(collections or [])
        self.q = q
        self.sort = sort
        self.page = page
        self.limit = limit
        self.sizes = list(sizes or [])
        self.colors = list(colors or [])
        self.in_stock = in_stock
        self.on_sale = on_sale
        self.featured = featured
        self.price_min = price_min
        self.price_max = price_max
        self.include = set(include or ())

    @property
    def collection_slugs(self):
        """Single ``collection`` wins over the ``collections`` list."""
        if self.collection:
            return [self.collection]
        return list(self.collections)

    @property
    def has_variant_filters(self):
        return bool(self.sizes or self.colors or self.in_stock is not None)

    def to_dict(self):
        return {name: getattr(self, name) for name in self.__slots__}

    def __eq__(self, other):
        if not isinstance(other, ProductFilters):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        active = {k: v for k, v in self.to_dict().items() if v not in (None, [], set())}
        return f"<ProductFilters {active}>"


def parse_comma_separated(value):
    """Split a comma-separated string into trimmed, non-empty entries."""
    if not value or not isinstance(value, str):
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def parse_boolean(value):
    """Return True/False for "true"/"1" and "false"/"0", otherwise None."""
    if not value:
        return None
    normalized = str(value).lower()
    if normalized in ("true", "1"):
        return True
    if normalized in ("false", "0"):
        return False
    return None


def parse_positive_int(value, default=1, minimum=1, maximum=math.inf):
    """Parse an integer clamped to ``[minimum, maximum]``.

    Non-numeric or below-minimum input yields ``max(default, minimum)``.
    Leading digits are honoured the way ``parseInt`` does ("12abc" → 12).
    """
    match = _INT_PREFIX.match(value) if isinstance(value, str) else None
    if match is None and isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    elif match is not None:
        parsed = int(match.group(1))
    else:
        return max(default, minimum)
    if parsed < minimum:
        return max(default, minimum)
    return min(parsed, maximum)


def parse_positive_number(value, default=None, minimum=0):
    """Parse a decimal number; non-numeric or below-minimum yields ``default``."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = float(value)
    else:
        match = _FLOAT_PREFIX.match(value) if isinstance(value, str) else None
        if match is None:
            return default
        parsed = float(match.group(1))
    if math.isnan(parsed) or parsed < minimum:
        return default
    return parsed


def parse_sort_param(value):
    """Map a sort key to its ordered ``(field, direction)`` pairs."""
    return SORT_ORDERS.get(value, SORT_ORDERS[DEFAULT_SORT])


def parse_includes(value):
    return {inc for inc in parse_comma_separated(value) if inc in VALID_INCLUDES}


def parse_product_filters(args):
    """Build a ``ProductFilters`` from request args (any ``.get`` mapping)."""
    return ProductFilters(
        collection=args.get("collection") or None,
        collections=parse_comma_separated(args.get("collections")),
        q=args.get("q") or None,
        sort=args.get("sort") or DEFAULT_SORT,
        page=parse_positive_int(args.get("page"), DEFAULT_PAGE, 1, MAX_PAGE),
        limit=parse_positive_int(args.get("limit"), DEFAULT_LIMIT, 1, MAX_LIMIT),
        sizes=parse_comma_separated(args.get("size") or args.get("sizes")),
        colors=parse_comma_separated(args.get("color") or args.get("colors")),
        in_stock=parse_boolean(args.get("inStock")),
        on_sale=parse_boolean(args.get("onSale")),
        featured=parse_boolean(args.get("featured")),
        price_min=parse_positive_number(args.get("priceMin"), None, 0),
        price_max=parse_positive_number(args.get("priceMax"), None, 0),
        include=parse_includes(args.get("include")),
    )
