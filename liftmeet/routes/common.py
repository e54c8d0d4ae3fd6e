import logging

from flask import jsonify, session

from ..errors import AuthenticationRequired, LiftMeetError
from ..extensions import db

logger = logging.getLogger(__name__)


def require_user(action: str) -> int:
    """Return the logged-in user's id or refuse the request."""
    user_id = session.get("user_id")
    if not user_id:
        raise AuthenticationRequired(f"User must be authenticated to {action}")
    return user_id


def api_success(data, status_code: int = 200):
    return jsonify({"success": True, "data": data}), status_code


def api_error(message: str, status_code: int):
    return jsonify({"success": False, "error": message}), status_code


def handle_error(error: Exception, server_message: str):
    """Roll back and map an exception onto the error envelope."""
    db.session.rollback()
    if isinstance(error, LiftMeetError):
        return api_error(error.message, error.status_code)
    logger.exception(server_message)
    return api_error(server_message, 500)
