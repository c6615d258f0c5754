import logging
from flask import request
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.admin import admin_bp
from fitnlitt.services import order_service
from fitnlitt.services.auth_service import require_auth
from fitnlitt.services.filter_parser import parse_positive_int
from fitnlitt.utils.response import not_found, ok, server_error

logger = logging.getLogger(__name__)


@admin_bp.route("/customers", methods=["GET"])
@require_auth
def list_customers():
    page = parse_positive_int(request.args.get("page"), 1, 1, 1000)
    limit = parse_positive_int(request.args.get("limit"), 20, 1, 100)
    try:
        result = order_service.list_customers(
            search=request.args.get("search"), page=page, limit=limit
        )
    except SQLAlchemyError:
        logger.exception("[admin/customers] list error")
        return server_error("Müşteriler alınamadı.")
    return ok(result)


@admin_bp.route("/customers/<customer_id>", methods=["GET"])
@require_auth
def get_customer(customer_id):
    try:
        customer = order_service.get_customer_with_orders(customer_id)
    except SQLAlchemyError:
        logger.exception("[admin/customers] get error")
        return server_error("Müşteri alınamadı.")
    if not customer:
        return not_found("Müşteri bulunamadı.")
    return ok(customer)
