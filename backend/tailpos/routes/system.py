# backend/tailpos/routes/system.py
"""
System health and first-run endpoints.
"""

import time
from flask import Blueprint, current_app, jsonify, request
from ..extensions import db
from ..models import Product, Sale, User
from ..services import bootstrap_service
from ..services.register_service import get_pos_session
from ..services.store_service import StorageError
from ..validation import ValidationError

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "products": db.session.query(Product).count(),
            "sales": db.session.query(Sale).count(),
            "users": db.session.query(User).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except Exception:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    status = 200 if database["status"] == "healthy" else 503
    return jsonify({"status": database["status"], "database": database}), status


@system_bp.get("/first-run")
def first_run_status():
    try:
        first_time = bootstrap_service.refresh_first_time(get_pos_session())
    except StorageError:
        current_app.logger.exception("Failed to read first-run marker")
        return jsonify({"error": "Storage unavailable"}), 503
    return jsonify({"first_time": first_time}), 200


@system_bp.post("/first-run")
def first_run_choose():
    """
    Resolve the first-run prompt.

    Body: {"mode": "sample"} loads the bundled sample data,
          {"mode": "blank"} starts with an empty catalog.
    """
    data = request.get_json(silent=True) or {}
    mode = data.get("mode")
    session = get_pos_session()

    try:
        if mode == "sample":
            result = bootstrap_service.start_with_sample_data(session)
        elif mode == "blank":
            result = bootstrap_service.start_blank(session)
        else:
            return jsonify({"error": "mode must be 'sample' or 'blank'"}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except StorageError:
        current_app.logger.exception("Failed to complete first run")
        return jsonify({"error": "Storage unavailable"}), 503
    except Exception:
        current_app.logger.exception("Failed to complete first run")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"first_time": session.first_time, **result}), 200
