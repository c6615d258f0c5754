from flask import Blueprint

admin_bp = Blueprint("admin", __name__)

from fitnlitt.blueprints.admin import (  # noqa: F401, E402
    products,
    collections,
    upload,
    orders,
    customers,
)
