import logging
import os
from datetime import datetime, timezone
from flask import Flask, request
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def create_app(config_name=None, auth_client=None):
    flask_app = Flask(__name__)

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV")
        if not config_name:
            # Managed platforms set PORT; default them to production settings.
            if os.environ.get("RAILWAY_ENVIRONMENT") or os.environ.get("PORT"):
                config_name = "production"
            else:
                config_name = "development"

    from fitnlitt.config import config_map

    config_cls = config_map.get(config_name, config_map["development"])
    flask_app.config.from_object(config_cls)
    flask_app.json.ensure_ascii = False
    flask_app.json.sort_keys = False

    if hasattr(config_cls, "init_app"):
        config_cls.init_app(flask_app)

    # Initialize extensions
    from fitnlitt.extensions import db, migrate, init_redis

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    init_redis(flask_app)

    from fitnlitt.services.auth_service import SupabaseAuthClient

    flask_app.extensions["supabase_auth"] = auth_client or SupabaseAuthClient.from_config(
        flask_app.config
    )

    # Import models so Alembic sees them
    from fitnlitt import models  # noqa: F401

    # Register blueprints
    from fitnlitt.blueprints.api import api_bp
    from fitnlitt.blueprints.admin import admin_bp

    flask_app.register_blueprint(api_bp, url_prefix="/api")
    flask_app.register_blueprint(admin_bp, url_prefix="/api/admin")

    # Register CLI commands
    from fitnlitt.cli import register_cli

    register_cli(flask_app)

    _register_hooks(flask_app)

    # Serve the built storefront SPA in production with WhiteNoise
    static_root = flask_app.config.get("STATIC_ROOT")
    if not flask_app.debug and static_root and os.path.isdir(static_root):
        from whitenoise import WhiteNoise

        flask_app.wsgi_app = WhiteNoise(
            flask_app.wsgi_app,
            root=static_root,
            index_file=True,
            max_age=31536000,  # 1 year cache for hashed assets
        )

    @flask_app.route("/api/health")
    def health():
        checks = {"status": "ok", "timestamp": _timestamp()}
        try:
            db.session.execute(db.text("SELECT 1"))
            checks["db"] = "ok"
        except Exception:
            flask_app.logger.exception("Health check DB probe failed")
            checks["db"] = "error"
            checks["status"] = "degraded"
        status_code = 200 if checks["status"] == "ok" else 503
        return checks, status_code

    return flask_app


def _timestamp():
    return datetime.now(timezone.utc).isoformat()


def _register_hooks(flask_app):
    @flask_app.before_request
    def log_request():
        logger.info("%s %s", request.method, request.path)

    @flask_app.after_request
    def add_cors_headers(response):
        origins = flask_app.config.get("CORS_ORIGINS") or []
        origin = request.headers.get("Origin")
        if "*" in origins:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
        response.headers["Access-Control-Allow-Methods"] = (
            "GET, POST, PUT, PATCH, DELETE, OPTIONS"
        )
        return response

    @flask_app.errorhandler(404)
    def not_found(error):
        return {
            "error": "Not Found",
            "message": f"Route {request.method} {request.path} not found",
            "timestamp": _timestamp(),
        }, 404

    @flask_app.errorhandler(405)
    def method_not_allowed(error):
        return {
            "error": "Method Not Allowed",
            "message": f"Route {request.method} {request.path} not allowed",
            "timestamp": _timestamp(),
        }, 405

    @flask_app.errorhandler(500)
    def server_error(error):
        logger.error("Unhandled server error: %s", getattr(error, "original_exception", error))
        return {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "timestamp": _timestamp(),
        }, 500
