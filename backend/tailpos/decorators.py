# Overview: Request decorators for API routes.

from functools import wraps
from flask import jsonify

from .services.register_service import get_pos_session


def require_login(f):
    """
    Require the till to be logged in.

    Returns 401 while the session is logged out.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_pos_session().logged_in:
            return jsonify({"error": "Authentication required"}), 401
        return f(*args, **kwargs)

    return decorated_function
