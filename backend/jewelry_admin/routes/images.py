# Overview: Serves stored item images by storage key.

from flask import Blueprint, Response, current_app

from ..constants import IMAGE_MIME_TYPES
from ..extensions import images
from ..validation import AppError

images_bp = Blueprint("images", __name__, url_prefix="/api/images")


@images_bp.get("/<path:key>")
def get_image(key: str):
    try:
        stored = images.get(key)
    except AppError as e:
        return Response(str(e), status=e.status_code, mimetype="text/plain")
    except Exception:
        current_app.logger.exception("Image serve error")
        return Response("Failed to serve image", status=500, mimetype="text/plain")

    if stored is None:
        return Response("Image not found", status=404, mimetype="text/plain")

    # Only known image types are served as such
    content_type = stored.content_type if stored.content_type in IMAGE_MIME_TYPES else "application/octet-stream"

    response = Response(stored.body, status=200, content_type=content_type)
    if stored.etag:
        response.headers["ETag"] = stored.etag
    response.headers["Cache-Control"] = "public, max-age=31536000, immutable"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Content-Security-Policy"] = "default-src 'none'; img-src 'self'; style-src 'unsafe-inline'"
    return response
