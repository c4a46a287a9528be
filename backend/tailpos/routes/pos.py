# Overview: Flask API routes for the till: cart, cash and checkout.

"""
POS routes.

Every mutation returns the full till state (cart lines, totals, cash,
change, submitable flag) so the front end never recomputes derived values.
All routes require a logged-in till.
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import products_service, register_service, sales_service
from ..services.receipt_service import render_receipt
from ..services.register_service import get_pos_session, RegisterError
from ..services.sales_service import SaleError
from ..services.store_service import StorageError
from ..validation import ValidationError
from ..decorators import require_login


pos_bp = Blueprint("pos", __name__, url_prefix="/api/pos")


def _state(status: int = 200):
    return jsonify({"session": get_pos_session().to_dict()}), status


@pos_bp.get("/cart")
@require_login
def get_cart_route():
    return _state()


@pos_bp.post("/cart")
@require_login
def add_to_cart_route():
    """
    Add one unit of a product to the cart.

    Body: {"product_id": int}
    """
    data = request.get_json(silent=True) or {}
    product_id = data.get("product_id")
    if not isinstance(product_id, int) or isinstance(product_id, bool):
        return jsonify({"error": "product_id required"}), 400

    try:
        product = products_service.get_product(product_id)
    except StorageError:
        current_app.logger.exception("Failed to load product")
        return jsonify({"error": "Storage unavailable"}), 503

    if product is None:
        return jsonify({"error": "Product not found"}), 404

    try:
        register_service.add_to_cart(get_pos_session(), product)
    except RegisterError as e:
        return jsonify({"error": str(e)}), 409
    return _state()


@pos_bp.post("/cart/<int:product_id>/qty")
@require_login
def change_qty_route(product_id: int):
    """
    Apply a quantity delta; the line disappears when it reaches zero.

    Body: {"delta": int}
    """
    data = request.get_json(silent=True) or {}
    try:
        result = register_service.change_qty(get_pos_session(), product_id, data.get("delta"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RegisterError as e:
        return jsonify({"error": str(e)}), 409

    if result is None:
        return jsonify({"error": "Product not in cart"}), 404
    return _state()


@pos_bp.delete("/cart")
@require_login
def clear_cart_route():
    try:
        register_service.clear_cart(get_pos_session())
    except RegisterError as e:
        return jsonify({"error": str(e)}), 409
    return _state()


@pos_bp.get("/cash/presets")
@require_login
def cash_presets_route():
    return jsonify({"presets": register_service.cash_presets()}), 200


@pos_bp.post("/cash")
@require_login
def cash_route():
    """
    Tender cash.

    Body: {"amount": int} adds to the tendered cash (quick-tender buttons);
          {"text": str} replaces it with the digits of free-form input.
    """
    data = request.get_json(silent=True) or {}
    session = get_pos_session()

    try:
        if "amount" in data:
            register_service.add_cash(session, data["amount"])
        elif "text" in data:
            register_service.set_cash_from_text(session, str(data["text"] or ""))
        else:
            return jsonify({"error": "amount or text required"}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RegisterError as e:
        return jsonify({"error": str(e)}), 409

    return _state()


@pos_bp.post("/menu")
@require_login
def menu_route():
    data = request.get_json(silent=True) or {}
    try:
        register_service.set_active_menu(get_pos_session(), data.get("menu"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return _state()


@pos_bp.post("/submit")
@require_login
def submit_route():
    """Open the receipt preview for the current cart."""
    try:
        sales_service.submit(get_pos_session())
    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    return _state()


@pos_bp.get("/receipt")
@require_login
def receipt_route():
    """Printable receipt for the pending sale, as HTML."""
    session = get_pos_session()
    if session.receipt is None:
        return jsonify({"error": "No receipt is pending"}), 404
    return render_receipt(session), 200, {"Content-Type": "text/html; charset=utf-8"}


@pos_bp.post("/receipt/confirm")
@require_login
def confirm_receipt_route():
    """Print the receipt and record the sale."""
    session = get_pos_session()
    try:
        sale = sales_service.confirm_and_record(session)
    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except StorageError:
        current_app.logger.exception("Failed to record sale")
        return jsonify({"error": "Storage unavailable"}), 503
    except Exception:
        current_app.logger.exception("Failed to record sale")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"sale": sale, "session": session.to_dict()}), 201


@pos_bp.post("/receipt/cancel")
@require_login
def cancel_receipt_route():
    sales_service.cancel_receipt(get_pos_session())
    return _state()
