"""Product listing, product detail and facet endpoints."""
import logging
from flask import request
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.api import api_bp
from fitnlitt.services import product_service
from fitnlitt.services.filter_parser import parse_product_filters
from fitnlitt.utils.response import ok, not_found, server_error

logger = logging.getLogger(__name__)


@api_bp.route("/products")
def list_products():
    """Filtered, sorted, paginated product listing with facets."""
    filters = parse_product_filters(request.args)
    try:
        result = product_service.list_products(filters)
    except SQLAlchemyError:
        logger.exception("Failed to fetch products (%r)", filters)
        return server_error("Failed to fetch products")
    return ok(result)


@api_bp.route("/products/<slug>")
def product_detail(slug):
    try:
        product = product_service.get_product_detail(slug)
    except SQLAlchemyError:
        logger.exception("Failed to fetch product %s", slug)
        return server_error("Failed to fetch product")
    if not product:
        return not_found(f"Product '{slug}' not found")
    return ok({"product": product})


@api_bp.route("/facets")
def facets():
    """Facets for the filtered product set (pagination params are ignored)."""
    filters = parse_product_filters(request.args)
    try:
        result = product_service.get_facets(filters)
    except SQLAlchemyError:
        logger.exception("Failed to compute facets (%r)", filters)
        return server_error("Failed to compute facets")
    return ok(result)
