"""Product query composition for catalog listings and facets."""
import logging
from collections import namedtuple
from fitnlitt.extensions import db
from fitnlitt.models.collection import Collection
from fitnlitt.models.product import Product
from fitnlitt.models.variant import Variant
from fitnlitt.services.filter_parser import parse_sort_param

logger = logging.getLogger(__name__)

BuiltQuery = namedtuple("BuiltQuery", ["query", "is_empty"])

EMPTY = BuiltQuery(query=None, is_empty=True)


def get_product_ids_by_variants(filters):
    """Resolve size/color/stock filters to a deduplicated product id list.

    Returns None when no variant filter is set, and an empty list when the
    filters are set but no variant matches.
    """
    if not filters.has_variant_filters:
        return None

    query = db.session.query(Variant.product_id)
    if filters.sizes:
        query = query.filter(Variant.size.in_(filters.sizes))
    if filters.colors:
        query = query.filter(Variant.color.in_(filters.colors))
    if filters.in_stock is True:
        query = query.filter(Variant.stock > 0)

    product_ids = []
    seen = set()
    for (product_id,) in query.all():
        if product_id not in seen:
            seen.add(product_id)
            product_ids.append(product_id)
    return product_ids


def resolve_collection_ids(slugs):
    rows = db.session.query(Collection.id).filter(Collection.slug.in_(slugs)).all()
    return [row[0] for row in rows]


def apply_search_filter(query, search_text):
    if search_text:
        query = query.filter(Product.title.icontains(search_text, autoescape=True))
    return query


def apply_price_filter(query, price_min, price_max):
    if price_min is not None and price_min >= 0:
        query = query.filter(Product.price >= price_min)
    if (
        price_max is not None
        and price_max > 0
        and (price_min is None or price_max >= price_min)
    ):
        query = query.filter(Product.price <= price_max)
    return query


def apply_sale_filter(query, on_sale):
    if on_sale is True:
        query = query.filter(
            Product.compare_at.isnot(None), Product.compare_at > Product.price
        )
    return query


def apply_featured_filter(query, featured):
    if featured is True:
        query = query.filter(Product.is_featured.is_(True))
    return query


def build_product_query(filters):
    """Compose the filtered products query.

    Filters apply in a fixed order: active flag, collection, variant ids,
    title search, price range, sale, featured. Returns ``EMPTY`` when the
    collection lookup or the variant resolver proves nothing can match.
    """
    query = Product.query.filter(Product.is_active.is_(True))

    slugs = filters.collection_slugs
    if slugs:
        collection_ids = resolve_collection_ids(slugs)
        if not collection_ids:
            logger.info("No collection matches slugs %s", slugs)
            return EMPTY
        query = query.filter(Product.collection_id.in_(collection_ids))

    variant_product_ids = get_product_ids_by_variants(filters)
    if variant_product_ids is not None:
        if not variant_product_ids:
            return EMPTY
        query = query.filter(Product.id.in_(variant_product_ids))

    query = apply_search_filter(query, filters.q)
    query = apply_price_filter(query, filters.price_min, filters.price_max)
    query = apply_sale_filter(query, filters.on_sale)
    query = apply_featured_filter(query, filters.featured)

    return BuiltQuery(query=query, is_empty=False)


def apply_sort(query, sort):
    for field, direction in parse_sort_param(sort):
        column = getattr(Product, field)
        query = query.order_by(column.desc() if direction == "desc" else column.asc())
    # Stable paging across equal sort keys
    return query.order_by(Product.id.asc())


def apply_pagination(query, page, limit):
    offset = (page - 1) * limit
    return query.offset(offset).limit(limit)


def get_filtered_product_ids(query):
    """All ids of a composed query, without ordering or paging."""
    rows = query.with_entities(Product.id).order_by(None).all()
    return [row[0] for row in rows]
