# Overview: Flask API routes for the till login gate.

from flask import Blueprint, request, jsonify, current_app

from ..services import auth_service
from ..services.register_service import get_pos_session
from ..services.store_service import StorageError


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Log the till in.

    Returns 401 with "Invalid username or password" on a miss; the session
    stays logged out.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not all([username, password]):
        return jsonify({"error": "username and password required"}), 400

    session = get_pos_session()
    try:
        ok = auth_service.login(session, username, password)
    except StorageError:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Storage unavailable"}), 503

    if not ok:
        return jsonify({"error": auth_service.INVALID_CREDENTIALS_MESSAGE}), 401

    return jsonify({
        "logged_in": True,
        "username": session.username,
        "message": "Login successful",
    }), 200


@auth_bp.post("/logout")
def logout_route():
    auth_service.logout(get_pos_session())
    return jsonify({"logged_in": False}), 200


@auth_bp.get("/status")
def status_route():
    session = get_pos_session()
    return jsonify({"logged_in": session.logged_in, "username": session.username}), 200
