import logging
from flask import request
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.admin import admin_bp
from fitnlitt.extensions import db
from fitnlitt.services import order_service
from fitnlitt.services.auth_service import current_admin_id, require_auth
from fitnlitt.services.filter_parser import parse_positive_int
from fitnlitt.utils.response import bad_request, not_found, ok, server_error

logger = logging.getLogger(__name__)


@admin_bp.route("/orders", methods=["GET"])
@require_auth
def list_orders():
    page = parse_positive_int(request.args.get("page"), 1, 1, 1000)
    limit = parse_positive_int(request.args.get("limit"), 20, 1, 100)
    try:
        result = order_service.list_orders(
            status=request.args.get("status"),
            search=request.args.get("search"),
            page=page,
            limit=limit,
        )
    except SQLAlchemyError:
        logger.exception("[admin/orders] list error")
        return server_error("Siparişler alınamadı.")
    return ok(result)


@admin_bp.route("/orders/<order_id>", methods=["GET"])
@require_auth
def get_order(order_id):
    try:
        order = order_service.get_order(order_id)
    except SQLAlchemyError:
        logger.exception("[admin/orders] get error")
        return server_error("Sipariş alınamadı.")
    if not order:
        return not_found("Sipariş bulunamadı.")
    return ok(order.to_dict())


@admin_bp.route("/orders/<order_id>", methods=["PATCH"])
@require_auth
def update_order(order_id):
    data = request.get_json(silent=True) or {}
    try:
        order = order_service.update_order(order_id, data, current_admin_id())
    except ValueError as e:
        return bad_request(str(e))
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("[admin/orders] update error")
        return server_error("Sipariş güncellenemedi.")
    if not order:
        return not_found("Sipariş bulunamadı.")
    return ok(order.to_dict())
