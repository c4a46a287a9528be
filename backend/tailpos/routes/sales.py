# Overview: Flask API routes for the sales history view.

from flask import Blueprint, jsonify, current_app

from ..services import sales_service
from ..services.register_service import get_pos_session
from ..services.store_service import StorageError
from ..decorators import require_login


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_login
def list_sales_route():
    """
    Open the sales view: every recorded sale, newest first.
    """
    try:
        sales = sales_service.open_sales(get_pos_session())
    except StorageError:
        current_app.logger.exception("Failed to load sales")
        return jsonify({"error": "Storage unavailable"}), 503

    return jsonify({"items": sales, "count": len(sales)}), 200
