"""Search-as-you-type endpoints."""
import logging
from flask import request
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.api import api_bp
from fitnlitt.services import product_service
from fitnlitt.services.filter_parser import parse_positive_int
from fitnlitt.utils.response import ok, bad_request, server_error

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTIONS = 8
MAX_SUGGESTIONS = 20
TOP_PRODUCTS = 3


@api_bp.route("/search/suggest")
def suggest():
    query_text = (request.args.get("q") or "").strip()
    if not query_text:
        return bad_request("Search query (q) is required")

    limit = parse_positive_int(
        request.args.get("limit"), DEFAULT_SUGGESTIONS, 1, MAX_SUGGESTIONS
    )
    try:
        suggestions = product_service.search_suggestions(query_text, limit)
    except SQLAlchemyError:
        logger.exception("Failed to fetch search suggestions for %r", query_text)
        return server_error("Failed to fetch search suggestions")
    return ok(suggestions)


@api_bp.route("/search/top")
def top():
    """Featured/newest products shown before the user types."""
    try:
        products = product_service.top_products(TOP_PRODUCTS)
    except SQLAlchemyError:
        logger.exception("Failed to fetch top products")
        return server_error("Failed to fetch top products")
    return ok(products)
