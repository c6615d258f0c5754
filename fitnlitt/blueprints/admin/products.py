"""Admin product management."""
import logging
from flask import request
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.admin import admin_bp
from fitnlitt.extensions import db
from fitnlitt.services import product_service
from fitnlitt.services.auth_service import current_admin_id, require_auth
from fitnlitt.services.filter_parser import parse_positive_int
from fitnlitt.utils.response import error_response, success_response

logger = logging.getLogger(__name__)


@admin_bp.route("/products", methods=["GET"])
@require_auth
def list_products():
    page = parse_positive_int(request.args.get("page"), 1, 1, 1000)
    limit = parse_positive_int(request.args.get("limit"), 20, 1, 100)
    try:
        result = product_service.list_admin_products(
            search=request.args.get("search"), page=page, limit=limit
        )
    except SQLAlchemyError:
        logger.exception("Error fetching products")
        return error_response("Failed to fetch products", 500)
    return success_response(result)


@admin_bp.route("/products/<product_id>", methods=["GET"])
@require_auth
def get_product(product_id):
    try:
        product = product_service.get_product(product_id)
        if not product:
            return error_response("Product not found", 404)
        return success_response(product_service.admin_product_dict(product))
    except SQLAlchemyError:
        logger.exception("Error fetching product %s", product_id)
        return error_response("Failed to fetch product", 500)


@admin_bp.route("/products", methods=["POST"])
@require_auth
def create_product():
    data = request.get_json(silent=True) or {}
    try:
        product = product_service.create_product(data, current_admin_id())
    except ValueError as e:
        db.session.rollback()
        return error_response(str(e), 400)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error creating product")
        return error_response("Failed to create product", 500)
    return success_response(
        product_service.admin_product_dict(product),
        "Product created successfully",
        201,
    )


@admin_bp.route("/products/<product_id>", methods=["PUT"])
@require_auth
def update_product(product_id):
    data = request.get_json(silent=True) or {}
    try:
        product = product_service.update_product(product_id, data, current_admin_id())
    except ValueError as e:
        db.session.rollback()
        return error_response(str(e), 400)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error updating product %s", product_id)
        return error_response("Failed to update product", 500)
    if not product:
        return error_response("Product not found", 404)
    return success_response(product.to_dict(), "Product updated successfully")


@admin_bp.route("/products/<product_id>", methods=["DELETE"])
@require_auth
def delete_product(product_id):
    try:
        deleted = product_service.delete_product(product_id, current_admin_id())
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error deleting product %s", product_id)
        return error_response("Failed to delete product", 500)
    if not deleted:
        return error_response("Product not found", 404)
    return success_response(None, "Product deleted successfully")
