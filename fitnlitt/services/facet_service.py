"""Facet computation: filter options with counts for the catalog UI.

``product_ids`` is the candidate set. ``None`` means every active product;
an empty list means the empty set.
"""
import logging
import math
from fitnlitt.extensions import db
from fitnlitt.models.collection import Collection
from fitnlitt.models.product import Product
from fitnlitt.models.variant import Variant

logger = logging.getLogger(__name__)

SIZE_ORDER = ("XS", "S", "M", "L", "XL", "XXL")


def empty_facets(include_collections=True):
    facets = {"sizes": [], "colors": [], "price": {"min": 0, "max": 0}}
    if include_collections:
        facets["collections"] = []
    return facets


def _restrict_variants(query, product_ids):
    if product_ids is None:
        return query.join(Product, Product.id == Variant.product_id).filter(
            Product.is_active.is_(True)
        )
    return query.filter(Variant.product_id.in_(product_ids))


def _restrict_products(query, product_ids):
    query = query.filter(Product.is_active.is_(True))
    if product_ids is not None:
        query = query.filter(Product.id.in_(product_ids))
    return query


def size_sort_key(value):
    """Canonical sizes first in XS..XXL order, the rest alphabetically."""
    if value in SIZE_ORDER:
        return (0, SIZE_ORDER.index(value), "")
    return (1, 0, value)


def compute_size_facets(product_ids=None):
    if product_ids is not None and not product_ids:
        return []
    query = db.session.query(Variant.size, db.func.count(Variant.id))
    rows = _restrict_variants(query, product_ids).group_by(Variant.size).all()
    facets = [{"value": size, "count": count} for size, count in rows if size]
    return sorted(facets, key=lambda f: size_sort_key(f["value"]))


def compute_color_facets(product_ids=None):
    if product_ids is not None and not product_ids:
        return []
    query = db.session.query(Variant.color, db.func.count(Variant.id))
    rows = _restrict_variants(query, product_ids).group_by(Variant.color).all()
    facets = [{"value": color, "count": count} for color, count in rows if color]
    return sorted(facets, key=lambda f: (-f["count"], f["value"]))


def compute_price_range(product_ids=None):
    if product_ids is not None and not product_ids:
        return {"min": 0, "max": 0}
    query = db.session.query(db.func.min(Product.price), db.func.max(Product.price))
    low, high = _restrict_products(query, product_ids).one()
    if low is None or high is None:
        return {"min": 0, "max": 0}
    return {"min": math.floor(float(low)), "max": math.ceil(float(high))}


def compute_collection_facets(product_ids=None):
    if product_ids is not None and not product_ids:
        return []
    query = (
        db.session.query(Collection.slug, Collection.title, db.func.count(Product.id))
        .join(Product, Product.collection_id == Collection.id)
    )
    rows = (
        _restrict_products(query, product_ids)
        .group_by(Collection.id, Collection.slug, Collection.title)
        .all()
    )
    facets = [
        {"slug": slug, "title": title, "count": count} for slug, title, count in rows
    ]
    return sorted(facets, key=lambda f: (-f["count"], f["slug"]))


def compute_facets(product_ids=None, include_collections=True):
    """Size, color, price and (optionally) collection facets for a product set.

    Collection facets are left out when the listing is already scoped to a
    single collection.
    """
    if product_ids is not None and not product_ids:
        return empty_facets(include_collections)

    facets = {
        "sizes": compute_size_facets(product_ids),
        "colors": compute_color_facets(product_ids),
        "price": compute_price_range(product_ids),
    }
    if include_collections:
        facets["collections"] = compute_collection_facets(product_ids)
    return facets
