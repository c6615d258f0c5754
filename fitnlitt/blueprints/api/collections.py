import logging
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.api import api_bp
from fitnlitt.services import collection_service
from fitnlitt.utils.response import ok, not_found, server_error

logger = logging.getLogger(__name__)


@api_bp.route("/collections")
def list_collections():
    try:
        collections = [c.to_dict() for c in collection_service.list_collections()]
    except SQLAlchemyError:
        logger.exception("Failed to fetch collections")
        return server_error("Failed to fetch collections")
    return ok({"collections": collections, "meta": {"total": len(collections)}})


@api_bp.route("/collections/<slug>")
def collection_detail(slug):
    try:
        collection = collection_service.get_collection_by_slug(slug)
    except SQLAlchemyError:
        logger.exception("Failed to fetch collection %s", slug)
        return server_error("Failed to fetch collection")
    if not collection:
        return not_found(f"Collection '{slug}' not found")
    return ok({"collection": collection.to_dict()})
