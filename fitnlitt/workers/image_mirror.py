"""RQ worker job: copy imported product images into Supabase Storage."""
import logging
from flask import current_app, has_app_context
from redis.exceptions import LockError
from fitnlitt import create_app
from fitnlitt import extensions
from fitnlitt.extensions import db
from fitnlitt.models.product import Product
from fitnlitt.services import import_service

logger = logging.getLogger(__name__)

_worker_app = None


def _get_app():
    """Return an app instance for worker execution.

    Reuse the current app when already inside an app context (tests/CLI),
    otherwise lazily create the worker app once.
    """
    global _worker_app
    if has_app_context():
        return current_app._get_current_object()
    if _worker_app is None:
        _worker_app = create_app()
    return _worker_app


def mirror_product_images(product_id, product_slug, sources):
    """Mirror ``sources`` and replace the product's image rows.

    Distributed lock: prevents two workers rewriting the same product's images.
    """
    app = _get_app()
    with app.app_context():
        product = db.session.get(Product, product_id)
        if not product:
            logger.error("Product %s not found", product_id)
            return None

        lock = None
        if extensions.redis_client is not None:
            lock = extensions.redis_client.lock(f"image_mirror:{product_id}", timeout=600)
            if not lock.acquire(blocking=False):
                logger.info("Lock held for product %s, skipping", product_id)
                return None

        http = import_service.make_http_client()
        try:
            mirror = import_service.ImageMirror.from_config(http, app.config)
            urls = import_service.sync_images(
                product.id, product_slug, sources, mirror=mirror
            )
            db.session.commit()
            logger.info("Mirrored %d image(s) for %s", len(urls), product_slug)
            return urls
        except Exception:
            db.session.rollback()
            logger.exception("Image mirroring failed for product %s", product_id)
            raise  # let RQ handle retry
        finally:
            http.close()
            if lock is not None:
                try:
                    lock.release()
                except LockError:
                    logger.warning("Lock for product %s expired before release", product_id)
