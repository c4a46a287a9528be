# Overview: Flask API routes for catalog operations; parses input and returns JSON responses.

"""
Catalog routes.

All routes require a logged-in till.
"""
from flask import Blueprint, request, current_app
from ..services import products_service
from ..services.register_service import get_pos_session
from ..services.store_service import StorageError
from ..validation import ValidationError
from ..decorators import require_login

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_login
def list_products():
    """
    List products, optionally filtered.

    Query params:
    - keyword: str (optional) - case-insensitive match on product name
    """
    keyword = request.args.get("keyword", "")
    session = get_pos_session()
    session.keyword = keyword

    try:
        items = products_service.filtered_products(keyword)
    except StorageError:
        current_app.logger.exception("Failed to list products")
        return {"error": "Storage unavailable"}, 503

    return {"items": items, "count": len(items), "keyword": keyword}


@products_bp.post("")
@require_login
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        created = products_service.create_product(payload)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except StorageError:
        current_app.logger.exception("Failed to create product")
        return {"error": "Storage unavailable"}, 503

    return created, 201


@products_bp.put("/<int:product_id>")
@require_login
def update_product_route(product_id: int):
    """Replace a product record."""
    payload = request.get_json(silent=True) or {}

    try:
        updated = products_service.update_product(product_id, payload)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except StorageError:
        current_app.logger.exception("Failed to update product")
        return {"error": "Storage unavailable"}, 503

    if not updated:
        return {"error": "Product not found"}, 404

    return updated, 200


@products_bp.delete("/<int:product_id>")
@require_login
def delete_product_route(product_id: int):
    try:
        deleted = products_service.delete_product(product_id)
    except StorageError:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Storage unavailable"}, 503

    if not deleted:
        return {"error": "Product not found"}, 404

    return {"ok": True}, 200
