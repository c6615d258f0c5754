"""JSON response envelopes.

Public endpoints answer errors as ``{error, message, timestamp}``; admin
endpoints use ``{success, data, message}`` / ``{success: false, error}``.
"""
import logging
import math
from datetime import datetime, timezone
from flask import jsonify

logger = logging.getLogger(__name__)


def _timestamp():
    return datetime.now(timezone.utc).isoformat()


def ok(data, code=200):
    return jsonify(data), code


def bad_request(message="Bad Request", details=None):
    payload = {"error": "Bad Request", "message": message, "timestamp": _timestamp()}
    if details:
        payload["details"] = details
    return jsonify(payload), 400


def not_found(message="Resource not found"):
    return jsonify(
        {"error": "Not Found", "message": message, "timestamp": _timestamp()}
    ), 404


def server_error(message="Internal Server Error"):
    """Generic 500; the original error is logged by the caller, never returned."""
    return jsonify(
        {
            "error": "Internal Server Error",
            "message": message,
            "timestamp": _timestamp(),
        }
    ), 500


def success_response(data=None, message=None, code=200):
    payload = {"success": True, "data": data}
    if message:
        payload["message"] = message
    return jsonify(payload), code


def error_response(message="An error occurred", code=400, data=None):
    payload = {"success": False, "error": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), code


def paginated_response(items, total, page, limit, facets=None):
    """Wrap a page of items with pagination metadata and sibling facets."""
    total_pages = math.ceil(total / limit) if limit else 0
    response = {
        "items": items,
        "meta": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": total_pages,
            "hasMore": page < total_pages,
        },
    }
    if facets is not None:
        response["facets"] = facets
    return response
