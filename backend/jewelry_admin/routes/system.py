# backend/jewelry_admin/routes/system.py
"""
System health endpoint: database and image storage reachability.
"""

import time
from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db

system_bp = Blueprint("system", __name__, url_prefix="/api/system")


def check_database_health() -> dict:
    """
    Check database connectivity.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


def check_image_storage() -> dict:
    storage = current_app.extensions.get("image_store")
    if storage is None:
        return {"status": "not_configured"}
    return {"status": "configured", "backend": type(storage).__name__}


@system_bp.get("/health")
def health():
    database = check_database_health()
    body = {
        "status": database["status"],
        "checks": {
            "database": database,
            "image_storage": check_image_storage(),
        },
    }
    return body, (200 if database["status"] == "healthy" else 503)
