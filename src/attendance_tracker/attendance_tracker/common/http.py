from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, request, session

from ..core.exceptions import HTTP_STATUS_BY_CODE, DomainError, InvalidInputError, NotAuthenticatedError


def current_employee_id() -> int:
    """Employee id of the signed-in caller (set at login in the session)."""
    employee_id = session.get("employee_id")
    if employee_id is None:
        raise NotAuthenticatedError("Unauthorized")
    try:
        return int(employee_id)
    except (TypeError, ValueError):
        raise NotAuthenticatedError("Invalid session") from None


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def error_response(exc: DomainError):
    status = HTTP_STATUS_BY_CODE.get(exc.code, 400)
    return jsonify({"error": str(exc), "code": exc.code.value}), status


def json_api(view):
    """Map DomainError to its HTTP status; anything else is logged and returns 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            if HTTP_STATUS_BY_CODE.get(e.code, 400) >= 500:
                current_app.logger.error("%s %s failed: %s", request.method, request.path, e)
            return error_response(e)
        except Exception:
            current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
            return jsonify({"error": "Internal server error", "code": "INTERNAL"}), 500

    return wrapper
