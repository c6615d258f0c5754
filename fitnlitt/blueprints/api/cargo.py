import logging
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.api import api_bp
from fitnlitt.services import order_service
from fitnlitt.utils.response import ok, bad_request, not_found, server_error

logger = logging.getLogger(__name__)


@api_bp.route("/cargo/<tracking_number>")
def cargo(tracking_number):
    if len(tracking_number.strip()) < 3:
        return bad_request("Geçerli bir takip numarası giriniz.")
    try:
        shipment = order_service.get_shipment(tracking_number)
    except SQLAlchemyError:
        logger.exception("Cargo lookup failed for %s", tracking_number)
        return server_error("Kargo bilgisi alınamadı.")
    if not shipment:
        return not_found("Bu takip numarasına ait kargo bulunamadı.")
    return ok(shipment.to_dict())
