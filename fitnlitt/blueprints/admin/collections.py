import logging
from flask import request
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.admin import admin_bp
from fitnlitt.extensions import db
from fitnlitt.services import collection_service
from fitnlitt.services.auth_service import current_admin_id, require_auth
from fitnlitt.utils.response import error_response, success_response

logger = logging.getLogger(__name__)


@admin_bp.route("/collections", methods=["GET"])
@require_auth
def list_collections():
    try:
        collections = collection_service.list_collections_with_counts()
    except SQLAlchemyError:
        logger.exception("Error fetching collections")
        return error_response("Failed to fetch collections", 500)
    return success_response(collections)


@admin_bp.route("/collections/<collection_id>", methods=["GET"])
@require_auth
def get_collection(collection_id):
    try:
        collection = collection_service.get_collection(collection_id)
    except SQLAlchemyError:
        logger.exception("Error fetching collection %s", collection_id)
        return error_response("Failed to fetch collection", 500)
    if not collection:
        return error_response("Collection not found", 404)
    return success_response(collection.to_dict())


@admin_bp.route("/collections", methods=["POST"])
@require_auth
def create_collection():
    data = request.get_json(silent=True) or {}
    try:
        collection = collection_service.create_collection(data, current_admin_id())
    except ValueError as e:
        db.session.rollback()
        return error_response(str(e), 400)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error creating collection")
        return error_response("Failed to create collection", 500)
    return success_response(
        collection.to_dict(), "Collection created successfully", 201
    )


@admin_bp.route("/collections/<collection_id>", methods=["PUT"])
@require_auth
def update_collection(collection_id):
    data = request.get_json(silent=True) or {}
    try:
        collection = collection_service.update_collection(
            collection_id, data, current_admin_id()
        )
    except ValueError as e:
        db.session.rollback()
        return error_response(str(e), 400)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error updating collection %s", collection_id)
        return error_response("Failed to update collection", 500)
    if not collection:
        return error_response("Collection not found", 404)
    return success_response(collection.to_dict(), "Collection updated successfully")


@admin_bp.route("/collections/<collection_id>", methods=["DELETE"])
@require_auth
def delete_collection(collection_id):
    try:
        deleted = collection_service.delete_collection(collection_id, current_admin_id())
    except ValueError as e:
        return error_response(str(e), 400)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error deleting collection %s", collection_id)
        return error_response("Failed to delete collection", 500)
    if not deleted:
        return error_response("Collection not found", 404)
    return success_response(None, "Collection deleted successfully")
