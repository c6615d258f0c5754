import logging
from datetime import datetime, timezone
from sqlalchemy.orm import selectinload
from fitnlitt.extensions import db
from fitnlitt.models.collection import Collection
from fitnlitt.models.image import ProductImage
from fitnlitt.models.product import Product
from fitnlitt.models.variant import Variant
from fitnlitt.services import audit_service
from fitnlitt.services.facet_service import compute_facets, empty_facets
from fitnlitt.services.filter_parser import parse_boolean
from fitnlitt.services.query_service import (
    apply_pagination,
    apply_sort,
    build_product_query,
    get_filtered_product_ids,
)
from fitnlitt.utils.response import paginated_response

logger = logging.getLogger(__name__)

CLOTHING_SIZES = ["XS", "S", "M", "L", "XL", "XS/S", "S/M", "M/L", "L/XL", "XXS", "XXL"]

PRODUCT_FIELDS = (
    "title",
    "slug",
    "description",
    "price",
    "compare_at",
    "currency",
    "collection_id",
    "is_active",
    "is_featured",
)


# ---------------------------------------------------------------------------
# Storefront
# ---------------------------------------------------------------------------

def variants_summary(product):
    variants = product.variants
    sizes = list(dict.fromkeys(v.size for v in variants))
    colors = list(dict.fromkeys(v.color for v in variants))
    prices = [v.price_override for v in variants if v.price_override is not None]
    total_stock = sum(v.stock or 0 for v in variants)
    return {
        "sizes": sizes,
        "colors": colors,
        "minPrice": min(prices) if prices else None,
        "maxPrice": max(prices) if prices else None,
        "inStock": total_stock > 0,
        "totalStock": total_stock,
    }


def format_listing_item(product, includes=()):
    primary = product.primary_image
    item = {
        "id": product.id,
        "slug": product.slug,
        "title": product.title,
        "price": product.price,
        "compare_at": product.compare_at,
        "currency": product.currency,
        "primaryImage": {"url": primary.url} if primary else None,
        "variantsSummary": variants_summary(product),
        "badges": product.badges(),
    }
    if "collection" in includes and product.collection:
        item["collection"] = {
            "slug": product.collection.slug,
            "title": product.collection.title,
        }
    if "images" in includes:
        item["images"] = [img.to_dict() for img in product.images]
    if "variants" in includes:
        item["variants"] = [format_variant(v, product.price) for v in product.variants]
    return item


def format_variant(variant, product_price):
    return {
        "id": variant.id,
        "size": variant.size,
        "color": variant.color,
        "sku": variant.sku,
        "price": variant.effective_price(product_price),
        "stock": variant.stock,
        "isInStock": variant.is_in_stock,
    }


def list_products(filters):
    """Filtered, sorted, paginated listing with facets over the filtered set."""
    include_collections = not filters.collection
    built = build_product_query(filters)
    if built.is_empty:
        return paginated_response(
            [], 0, filters.page, filters.limit, empty_facets(include_collections)
        )

    total = built.query.order_by(None).count()
    page_query = apply_pagination(
        apply_sort(built.query, filters.sort), filters.page, filters.limit
    ).options(
        selectinload(Product.variants),
        selectinload(Product.images),
        selectinload(Product.collection),
    )
    items = [format_listing_item(p, filters.include) for p in page_query.all()]

    product_ids = get_filtered_product_ids(built.query)
    facets = compute_facets(product_ids, include_collections)

    return paginated_response(items, total, filters.page, filters.limit, facets)


def get_facets(filters):
    include_collections = not filters.collection
    built = build_product_query(filters)
    if built.is_empty:
        return empty_facets(include_collections)
    return compute_facets(get_filtered_product_ids(built.query), include_collections)


def get_product_detail(slug):
    """Active product by slug with collection, images and variants, or None."""
    product = (
        Product.query.filter_by(slug=slug, is_active=True)
        .options(
            selectinload(Product.variants),
            selectinload(Product.images),
            selectinload(Product.collection),
        )
        .first()
    )
    if not product:
        return None

    collection = product.collection
    variants = sorted(product.variants, key=lambda v: (v.size, v.color))
    return {
        "id": product.id,
        "slug": product.slug,
        "title": product.title,
        "description": product.description,
        "price": product.price,
        "compare_at": product.compare_at,
        "currency": product.currency,
        "collection": {
            "slug": collection.slug,
            "title": collection.title,
            "description": collection.description,
            "hero_image": collection.hero_image,
        }
        if collection
        else None,
        "images": [img.to_dict() for img in product.images],
        "variants": [format_variant(v, product.price) for v in variants],
        "badges": product.badges(),
    }


def _format_suggestion(product):
    primary = product.primary_image
    return {
        "slug": product.slug,
        "title": product.title,
        "price": product.price,
        "currency": product.currency,
        "primaryImageUrl": primary.url if primary else None,
        "collectionSlug": product.collection.slug if product.collection else None,
    }


def _recommended_active():
    return (
        Product.query.filter(Product.is_active.is_(True))
        .options(selectinload(Product.images), selectinload(Product.collection))
        .order_by(Product.is_featured.desc(), Product.created_at.desc())
    )


def search_suggestions(query_text, limit=8):
    products = (
        _recommended_active()
        .filter(Product.title.icontains(query_text, autoescape=True))
        .limit(limit)
        .all()
    )
    return [_format_suggestion(p) for p in products]


def top_products(limit=3):
    return [_format_suggestion(p) for p in _recommended_active().limit(limit).all()]


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

def _parse_price(value, field, required=False):
    if value is None or value == "":
        if required:
            raise ValueError(f"{field} is required")
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a number")
    if price < 0:
        raise ValueError(f"{field} must not be negative")
    return price


def _validate_compare_at(price, compare_at):
    if compare_at is not None and compare_at <= price:
        raise ValueError("compare_at must be greater than price")


def _check_collection(collection_id):
    if collection_id and not db.session.get(Collection, collection_id):
        raise ValueError("Collection not found")


def _parse_flag(value, field):
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    parsed = parse_boolean(value) if isinstance(value, str) else None
    if parsed is None:
        raise ValueError(f"{field} must be a boolean")
    return parsed


def _object_list(value, field):
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValueError(f"{field} must be a list of objects")
    return value


def _build_variants(product_id, variants):
    rows = []
    for v in _object_list(variants, "variants"):
        if not v.get("sku") or not v.get("size") or not v.get("color"):
            raise ValueError("Variants require size, color and sku")
        stock = int(v.get("stock") or 0)
        if stock < 0:
            raise ValueError("Variant stock must not be negative")
        rows.append(
            Variant(
                product_id=product_id,
                size=v["size"],
                color=v["color"],
                sku=v["sku"],
                price_override=_parse_price(v.get("price_override"), "price_override"),
                stock=stock,
            )
        )
    return rows


def admin_product_dict(product):
    data = product.to_dict()
    data["collection"] = (
        {
            "id": product.collection.id,
            "slug": product.collection.slug,
            "title": product.collection.title,
        }
        if product.collection
        else None
    )
    data["images"] = [
        {"id": img.id, "url": img.url, "sort": img.sort} for img in product.images
    ]
    data["variants"] = [v.to_dict() for v in product.variants]
    return data


def list_admin_products(search=None, page=1, limit=20):
    query = Product.query
    if search:
        query = query.filter(Product.title.icontains(search, autoescape=True))
    total = query.count()
    products = (
        query.order_by(Product.created_at.desc(), Product.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "products": [p.to_dict() for p in products],
        "total": total,
        "page": page,
        "limit": limit,
    }


def get_product(product_id):
    return db.session.get(Product, product_id)


def create_product(data, admin_id):
    """Create a product with optional nested variants and images.

    Raises ValueError on invalid input.
    """
    title = (data.get("title") or "").strip()
    slug = (data.get("slug") or "").strip()
    if not title or not slug:
        raise ValueError("Title and slug are required")
    if Product.query.filter_by(slug=slug).first():
        raise ValueError("Product with this slug already exists")

    price = _parse_price(data.get("price"), "price", required=True)
    compare_at = _parse_price(data.get("compare_at"), "compare_at")
    _validate_compare_at(price, compare_at)
    collection_id = data.get("collection_id") or None
    _check_collection(collection_id)

    product = Product(
        title=title,
        slug=slug,
        description=data.get("description") or "",
        price=price,
        compare_at=compare_at,
        currency=data.get("currency") or "TRY",
        collection_id=collection_id,
        is_active=_parse_flag(data.get("is_active", True), "is_active"),
        is_featured=_parse_flag(data.get("is_featured", False), "is_featured"),
    )
    db.session.add(product)
    db.session.flush()  # get product.id

    for variant in _build_variants(product.id, data.get("variants")):
        db.session.add(variant)

    images = _object_list(data.get("images"), "images")
    for index, img in enumerate(images):
        if not img.get("url"):
            raise ValueError("Images require a url")
        sort = img.get("sort")
        db.session.add(
            ProductImage(
                product_id=product.id,
                url=img["url"],
                sort=index if sort is None else int(sort),
            )
        )

    audit_service.record(
        admin_id, "CREATE_PRODUCT", "product", product.id, {"slug": slug}
    )
    db.session.commit()
    logger.info("Product %s created by %s", slug, admin_id)
    return product


def update_product(product_id, data, admin_id):
    """Update product fields present in ``data``; returns None when missing."""
    product = db.session.get(Product, product_id)
    if not product:
        return None

    changes = {k: data[k] for k in PRODUCT_FIELDS if k in data}
    if "slug" in changes:
        slug = (changes["slug"] or "").strip()
        if not slug:
            raise ValueError("Slug must not be empty")
        clash = Product.query.filter(Product.slug == slug, Product.id != product.id).first()
        if clash:
            raise ValueError("Product with this slug already exists")
        changes["slug"] = slug
    if "title" in changes and not (changes["title"] or "").strip():
        raise ValueError("Title must not be empty")

    price = product.price
    if "price" in changes:
        price = _parse_price(changes["price"], "price", required=True)
        changes["price"] = price
    compare_at = product.compare_at
    if "compare_at" in changes:
        compare_at = _parse_price(changes["compare_at"], "compare_at")
        changes["compare_at"] = compare_at
    _validate_compare_at(price, compare_at)

    if "collection_id" in changes:
        changes["collection_id"] = changes["collection_id"] or None
        _check_collection(changes["collection_id"])
    for flag in ("is_active", "is_featured"):
        if flag in changes:
            changes[flag] = _parse_flag(changes[flag], flag)

    for key, value in changes.items():
        setattr(product, key, value)
    product.updated_at = datetime.now(timezone.utc)

    audit_service.record(
        admin_id, "UPDATE_PRODUCT", "product", product.id, {"fields": sorted(changes)}
    )
    db.session.commit()
    return product


def delete_product(product_id, admin_id):
    """Delete a product; variants and images cascade. False when missing."""
    product = db.session.get(Product, product_id)
    if not product:
        return False

    audit_service.record(
        admin_id, "DELETE_PRODUCT", "product", product.id, {"slug": product.slug}
    )
    db.session.delete(product)
    db.session.commit()
    return True


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------

def feature_clothing_products():
    """Flag every product that has a clothing-size variant as featured."""
    rows = (
        db.session.query(Variant.product_id)
        .filter(Variant.size.in_(CLOTHING_SIZES))
        .distinct()
        .all()
    )
    product_ids = [row[0] for row in rows]
    if not product_ids:
        return []

    products = Product.query.filter(Product.id.in_(product_ids)).all()
    for product in products:
        product.is_featured = True
    db.session.commit()
    return products


def get_stats():
    """Product counts for the ``stats`` command."""
    rows = (
        db.session.query(Product.is_active, db.func.count(Product.id))
        .group_by(Product.is_active)
        .all()
    )
    counts = {"active" if active else "inactive": count for active, count in rows}
    counts["featured"] = Product.query.filter(Product.is_featured.is_(True)).count()
    counts["on_sale"] = Product.query.filter(
        Product.compare_at.isnot(None), Product.compare_at > Product.price
    ).count()
    return counts
