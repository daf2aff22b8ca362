# Overview: Boundary decorator that turns service calls into uniform action results.

from functools import wraps

from flask import current_app, jsonify

from .extensions import db
from .validation import AppError

STATUS_BY_KIND = {
    "validation": 400,
    "not_found": 404,
    "conflict": 409,
    "configuration": 500,
    "unknown": 500,
}


def success(data=None) -> dict:
    return {"success": True, "data": data}


def failure(error: str, kind: str = "unknown") -> dict:
    return {"success": False, "error": error, "kind": kind}


def action(failure_message: str):
    """
    Run a service call and report its outcome as
    {"success": True, "data": ...} or {"success": False, "error": ..., "kind": ...}.

    Nothing raised inside the call escapes: known AppErrors keep their
    message and kind, anything else is logged and reported as "unknown".
    The session is rolled back on every failure so no partial write is
    left pending for the rest of the request.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                data = f(*args, **kwargs)
            except AppError as e:
                db.session.rollback()
                return failure(str(e), e.kind)
            except Exception as e:
                db.session.rollback()
                current_app.logger.exception(failure_message)
                return failure(str(e) or failure_message, "unknown")
            return success(data)

        return decorated_function

    return decorator


def to_response(result: dict, success_status: int = 200):
    """Flask response for an action result."""
    if result["success"]:
        return jsonify(result), success_status
    return jsonify(result), STATUS_BY_KIND.get(result.get("kind"), 500)
