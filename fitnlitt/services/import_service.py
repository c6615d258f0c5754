"""WooCommerce Store API → catalog importer.

Uses the public Store API (no auth keys required):
    GET /wp-json/wc/store/v1/products/categories
    GET /wp-json/wc/store/v1/products

Writes collections, products, product_images and variants, and copies
product images into Supabase Storage.
"""
import html
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
import httpx
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.extensions import db
from fitnlitt.models.collection import Collection
from fitnlitt.models.image import ProductImage
from fitnlitt.models.product import Product
from fitnlitt.models.variant import Variant
from fitnlitt.services import image_service, storage_service

logger = logging.getLogger(__name__)

STORE_API_PATH = "/wp-json/wc/store/v1"
PER_PAGE = 100
REQUEST_DELAY = 0.3  # polite delay between paginated requests
UPLOAD_CONCURRENCY = 3
USER_AGENT = "fitnlitt-importer/1.0"
IN_STOCK_QUANTITY = 10

_SIZE_ATTR = re.compile(r"size|beden", re.IGNORECASE)
_COLOR_ATTR = re.compile(r"colou?r|renk", re.IGNORECASE)
_UNCATEGORIZED = re.compile(r"^uncategorized$", re.IGNORECASE)

_TURKISH = str.maketrans({"ğ": "g", "ü": "u", "ş": "s", "ı": "i", "ö": "o", "ç": "c"})


class StoreApiError(Exception):
    def __init__(self, message, status=None, url=None):
        super().__init__(message)
        self.status = status
        self.url = url


class StoreApiUnavailable(StoreApiError):
    """The Store API answered 403/404: WooCommerce missing or blocked."""


# ---------------------------------------------------------------------------
# Text and price helpers
# ---------------------------------------------------------------------------

def strip_html(text):
    """Strip tags, decode entities and collapse whitespace."""
    text = re.sub(r"<[^>]*>", " ", text or "")
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def decode_entities(text):
    """Decode entities in a plain title (WC sends ``&#8211;`` and friends)."""
    return html.unescape(text or "").strip()


def parse_wc_price(raw, minor_unit=2):
    """Store API prices are minor-unit strings ("12990" → 129.90)."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if value != value:  # NaN
        return 0.0
    if minor_unit and minor_unit > 0:
        return round(value / (10 ** minor_unit), minor_unit)
    return value


def slugify(text):
    """Slugify Turkish text."""
    text = (text or "").lower().translate(_TURKISH)
    return re.sub(r"[^a-z0-9]+", "-", text).strip("-")


# ---------------------------------------------------------------------------
# Store API
# ---------------------------------------------------------------------------

def make_http_client(timeout=30.0):
    return httpx.Client(
        headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        timeout=timeout,
        follow_redirects=True,
    )


def fetch_json(http, url, params=None):
    resp = http.get(url, params=params)
    if resp.status_code in (403, 404):
        raise StoreApiUnavailable(
            f"HTTP {resp.status_code} from {url}", status=resp.status_code, url=url
        )
    if resp.status_code >= 400:
        raise StoreApiError(
            f"HTTP {resp.status_code} from {url}", status=resp.status_code, url=url
        )
    return resp.json(), resp.headers


def fetch_all_categories(http, store_base):
    url = f"{store_base}{STORE_API_PATH}/products/categories"
    try:
        data, _ = fetch_json(http, url, params={"per_page": 100, "hide_empty": "true"})
    except StoreApiUnavailable as e:
        logger.warning(
            "Categories endpoint returned %s, collections will be inferred from products",
            e.status,
        )
        return []
    logger.info("Found %d categories", len(data))
    return data


def fetch_all_products(http, store_base, limit=None, delay=REQUEST_DELAY, sleep=time.sleep):
    """Page through the products endpoint until exhausted or ``limit`` reached.

    Raises StoreApiUnavailable when the Store API is missing or blocked.
    """
    url = f"{store_base}{STORE_API_PATH}/products"
    collected = []
    page = 1
    total_pages = 1

    while page <= total_pages:
        params = {
            "per_page": PER_PAGE,
            "page": page,
            "catalog_visibility": "visible",
            "status": "publish",
        }
        data, headers = fetch_json(http, url, params=params)
        try:
            total_pages = int(headers.get("x-wp-totalpages") or 1) or 1
        except ValueError:
            total_pages = 1
        logger.info("Products page %d/%d: got %d", page, total_pages, len(data))
        collected.extend(data)

        if limit is not None and len(collected) >= limit:
            logger.info("Reached limit=%d, stopping pagination", limit)
            break

        page += 1
        if page <= total_pages and delay:
            sleep(delay)

    return collected[:limit] if limit is not None else collected


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------

def collection_row(category):
    image = category.get("image") or {}
    return {
        "slug": category.get("slug") or slugify(category.get("name", "")),
        "title": decode_entities(category.get("name", "")),
        "description": strip_html(category.get("description") or ""),
        "hero_image": image.get("src"),
    }


def product_row(wc, collection_id=None):
    """Map a Store API product to ``products`` columns.

    ``compare_at`` is only set when the regular price is strictly greater
    than the selling price.
    """
    prices = wc.get("prices") or {}
    minor_unit = prices.get("currency_minor_unit", 2)
    price = parse_wc_price(prices.get("price"), minor_unit)
    regular_price = parse_wc_price(prices.get("regular_price"), minor_unit)

    return {
        "slug": wc.get("slug") or slugify(wc.get("name", "")),
        "title": decode_entities(wc.get("name", "")),
        "description": strip_html(
            wc.get("description") or wc.get("short_description") or ""
        ),
        "price": price,
        "compare_at": regular_price if regular_price > price else None,
        "currency": prices.get("currency_code") or "TRY",
        "collection_id": collection_id,
        "is_active": wc.get("stock_status") != "outofstock",
        "is_featured": False,
    }


def _find_attribute(wc, pattern, taxonomies):
    for attr in wc.get("attributes") or []:
        if pattern.search(attr.get("name") or "") or attr.get("taxonomy") in taxonomies:
            return attr
    return None


def build_variant_rows(product_id, wc):
    """Cross product of size × color terms ("One Size" / "Default" if absent)."""
    size_attr = _find_attribute(wc, _SIZE_ATTR, ("pa_size", "pa_beden"))
    color_attr = _find_attribute(wc, _COLOR_ATTR, ("pa_color", "pa_renk"))

    sizes = [t["name"] for t in size_attr["terms"] if t.get("name")] if size_attr else ["One Size"]
    colors = [t["name"] for t in color_attr["terms"] if t.get("name")] if color_attr else ["Default"]
    stock = IN_STOCK_QUANTITY if wc.get("is_in_stock") else 0
    slug = wc.get("slug") or slugify(wc.get("name", ""))

    return [
        {
            "product_id": product_id,
            "size": size,
            "color": color,
            "sku": f"{slug}-{slugify(size)}-{slugify(color)}",
            "price_override": None,
            "stock": stock,
        }
        for size in sizes
        for color in colors
    ]


# ---------------------------------------------------------------------------
# Upserts
# ---------------------------------------------------------------------------

def _upsert(model, key, row):
    instance = model.query.filter_by(**{key: row[key]}).first()
    if instance is None:
        instance = model(**row)
        db.session.add(instance)
    else:
        for field, value in row.items():
            setattr(instance, field, value)
    db.session.flush()
    return instance


def upsert_collection(category):
    return _upsert(Collection, "slug", collection_row(category))


def upsert_product(wc, collection_id):
    return _upsert(Product, "slug", product_row(wc, collection_id))


def upsert_variants(product_id, wc):
    rows = build_variant_rows(product_id, wc)
    for row in rows:
        _upsert(Variant, "sku", row)
    return rows


def replace_images(product_id, urls):
    """Delete the product's image rows and insert ``urls`` in order."""
    ProductImage.query.filter_by(product_id=product_id).delete()
    for index, url in enumerate(urls):
        db.session.add(ProductImage(product_id=product_id, url=url, sort=index))
    db.session.flush()


# ---------------------------------------------------------------------------
# Image mirroring
# ---------------------------------------------------------------------------

class ImageMirror:
    """Copies remote images into the storage bucket, keeping the source URL on failure."""

    def __init__(self, http, s3_client, bucket, supabase_url):
        self.http = http
        self.s3_client = s3_client
        self.bucket = bucket
        self.supabase_url = supabase_url

    @classmethod
    def from_config(cls, http, config):
        return cls(
            http,
            storage_service.get_client(config),
            config["SUPABASE_STORAGE_BUCKET"],
            config["SUPABASE_URL"],
        )

    def mirror(self, src_url, product_slug, index):
        try:
            resp = self.http.get(src_url, timeout=20.0)
            resp.raise_for_status()
            content_type = resp.headers.get("content-type") or "image/jpeg"
            ext = image_service.extension_for(content_type)
            key = f"products/{product_slug}/{index}.{ext}"
            storage_service.upload(
                key,
                resp.content,
                content_type=content_type.split(";")[0],
                client=self.s3_client,
                bucket=self.bucket,
            )
        except (httpx.HTTPError, BotoCoreError, ClientError) as e:
            logger.warning("Image upload failed for %s: %s, keeping original URL", src_url, e)
            return src_url
        return storage_service.public_url(self.supabase_url, self.bucket, key)

    def mirror_all(self, sources, product_slug):
        """Mirror ``sources`` with at most UPLOAD_CONCURRENCY uploads in flight."""
        with ThreadPoolExecutor(max_workers=UPLOAD_CONCURRENCY) as pool:
            return list(
                pool.map(
                    lambda pair: self.mirror(pair[1], product_slug, pair[0]),
                    enumerate(sources),
                )
            )


def sync_images(product_id, product_slug, sources, mirror=None):
    """Replace a product's images, mirrored into storage when ``mirror`` is given."""
    if not sources:
        return []
    urls = mirror.mirror_all(sources, product_slug) if mirror else list(sources)
    replace_images(product_id, urls)
    return urls


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def _is_uncategorized(category):
    return bool(
        _UNCATEGORIZED.match(category.get("slug") or "")
        or _UNCATEGORIZED.match(category.get("name") or "")
    )


def import_store(
    store_base=None,
    limit=None,
    dry_run=False,
    skip_images=False,
    background_images=False,
    http=None,
    mirror=None,
    sleep=time.sleep,
):
    """Import categories and products from a WooCommerce Store API.

    Returns ``{"imported": n, "failed": n, "collections": n}``. Per-product
    database failures are logged and counted; StoreApiUnavailable propagates.
    """
    config = current_app.config
    store_base = (store_base or config["STORE_API_BASE"]).rstrip("/")
    own_http = http is None
    http = http or make_http_client()
    stats = {"imported": 0, "failed": 0, "collections": 0}

    try:
        if mirror is None and not (dry_run or skip_images or background_images):
            mirror = ImageMirror.from_config(http, config)

        collection_ids = {}
        for category in fetch_all_categories(http, store_base):
            if _is_uncategorized(category):
                continue
            if dry_run:
                logger.info("[DRY] upsert collection %s", collection_row(category)["slug"])
                collection_ids[category["slug"]] = None
                continue
            collection_ids[category["slug"]] = _import_collection(category)
        stats["collections"] = len(collection_ids)

        products = fetch_all_products(http, store_base, limit=limit, sleep=sleep)
        logger.info("Importing %d products", len(products))

        for wc in products:
            row = product_row(wc)
            if dry_run:
                logger.info(
                    "[DRY] upsert product %s | %s %s, %d variant(s), %d image(s)",
                    row["slug"],
                    row["price"],
                    row["currency"],
                    len(build_variant_rows(None, wc)),
                    len(wc.get("images") or []),
                )
                stats["imported"] += 1
                continue

            try:
                collection_id = _resolve_collection(wc, collection_ids)
                product = upsert_product(wc, collection_id)
                sources = [img["src"] for img in wc.get("images") or [] if img.get("src")]
                if background_images:
                    _enqueue_images(product.id, product.slug, sources)
                elif sources:
                    sync_images(product.id, product.slug, sources, mirror=mirror)
                upsert_variants(product.id, wc)
                db.session.commit()
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception("Product import failed: %s", row["slug"])
                stats["failed"] += 1
                continue

            logger.info("Imported %s: %s %s", row["slug"], row["price"], row["currency"])
            stats["imported"] += 1
    finally:
        if own_http:
            http.close()

    return stats


def _import_collection(category):
    try:
        collection = upsert_collection(category)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Collection upsert failed: %s", category.get("slug"))
        return None
    return collection.id


def _resolve_collection(wc, collection_ids):
    """First non-uncategorized category; unknown ones are created on the fly."""
    for category in wc.get("categories") or []:
        if _is_uncategorized(category):
            continue
        slug = category.get("slug")
        if collection_ids.get(slug):
            return collection_ids[slug]
        collection = upsert_collection(
            {**category, "description": "", "image": None}
        )
        collection_ids[slug] = collection.id
        return collection.id
    return None


def _enqueue_images(product_id, product_slug, sources):
    from fitnlitt.extensions import get_task_queue
    from fitnlitt.workers.image_mirror import mirror_product_images

    get_task_queue().enqueue(mirror_product_images, product_id, product_slug, sources)
