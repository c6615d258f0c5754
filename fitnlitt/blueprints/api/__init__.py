from flask import Blueprint

api_bp = Blueprint("api", __name__)

from fitnlitt.blueprints.api import catalog, collections, search, cargo  # noqa: F401, E402
