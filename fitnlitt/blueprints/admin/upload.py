"""Admin image uploads to Supabase Storage."""
import logging
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app, request
from sqlalchemy.exc import SQLAlchemyError
from fitnlitt.blueprints.admin import admin_bp
from fitnlitt.extensions import db
from fitnlitt.services import audit_service, image_service, storage_service
from fitnlitt.services.auth_service import current_admin_id, require_auth
from fitnlitt.utils.response import error_response, success_response

logger = logging.getLogger(__name__)

MAX_FILES = 10
STORAGE_ERRORS = (BotoCoreError, ClientError)


def _store_file(file_storage):
    """Validate and upload one werkzeug FileStorage; returns its public info.

    Raises ValueError for non-images and storage errors for upload failures.
    """
    if not (file_storage.mimetype or "").startswith("image/"):
        raise ValueError("Only image files are allowed")

    data, content_type = image_service.validate_image(
        file_storage.read(), current_app.config["MAX_UPLOAD_SIZE"]
    )
    filename = image_service.safe_filename(file_storage.filename)
    path = f"products/{filename}"
    storage_service.upload(path, data, content_type=content_type)
    return {
        "url": storage_service.get_public_url(path),
        "path": path,
        "filename": filename,
    }


def _audit_uploads(paths):
    try:
        audit_service.record(
            current_admin_id(), "UPLOAD_IMAGE", "storage", None, {"paths": paths}
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to record upload audit entry")


@admin_bp.route("/upload", methods=["POST"])
@require_auth
def upload_image():
    file_storage = request.files.get("file")
    if not file_storage:
        return error_response("No file provided", 400)

    try:
        uploaded = _store_file(file_storage)
    except ValueError as e:
        return error_response(str(e), 400)
    except STORAGE_ERRORS:
        logger.exception("Error uploading image")
        return error_response("Failed to upload image", 500)

    _audit_uploads([uploaded["path"]])
    return success_response(uploaded, "Image uploaded successfully")


@admin_bp.route("/upload/multiple", methods=["POST"])
@require_auth
def upload_images():
    files = request.files.getlist("files")
    if not files:
        return error_response("No files provided", 400)
    if len(files) > MAX_FILES:
        return error_response(f"At most {MAX_FILES} files per request", 400)

    uploaded = []
    errors = []
    for file_storage in files:
        try:
            uploaded.append(_store_file(file_storage))
        except ValueError as e:
            errors.append({"filename": file_storage.filename, "error": str(e)})
        except STORAGE_ERRORS:
            logger.exception("Error uploading %s", file_storage.filename)
            errors.append({"filename": file_storage.filename, "error": "Upload failed"})

    if not uploaded:
        return error_response("All uploads failed", 500, {"errors": errors})

    _audit_uploads([u["path"] for u in uploaded])
    return success_response(
        {"uploaded": uploaded, "errors": errors},
        f"{len(uploaded)} of {len(files)} images uploaded successfully",
    )


@admin_bp.route("/upload", methods=["DELETE"])
@require_auth
def delete_image():
    data = request.get_json(silent=True) or {}
    path = data.get("path")
    if not path:
        return error_response("File path is required", 400)

    try:
        storage_service.delete(path)
    except STORAGE_ERRORS:
        logger.exception("Error deleting image %s", path)
        return error_response("Failed to delete image", 500)

    try:
        audit_service.record(
            current_admin_id(), "DELETE_IMAGE", "storage", None, {"path": path}
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to record delete audit entry")
    return success_response(None, "Image deleted successfully")
