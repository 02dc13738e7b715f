# Overview: Flask API routes for products operations; parses input and returns JSON responses.

"""
Product catalog routes.

TENANCY: All product operations are scoped to g.store_id.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..errors import LedgerError
from ..services import products_service
from . import error_response, internal_error_response


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products_route():
    """
    Filtered, paginated product list, newest first.

    Query params (all optional):
    - name: case-insensitive substring
    - category: one of the catalog categories, or "All"
    - minPrice / maxPrice, minStock / maxStock: inclusive bounds
    - page: 1-indexed (default 1)
    - limit: page size (default 20, max 100)
    """
    try:
        return jsonify(products_service.list_products(g.store_id, request.args.to_dict())), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list products")
        return internal_error_response()


@products_bp.get("/low-stock")
@require_auth
def low_stock_route():
    try:
        products = products_service.low_stock_products(g.store_id)
        return jsonify({"products": [p.to_dict() for p in products], "count": len(products)}), 200
    except Exception:
        current_app.logger.exception("Failed to list low stock products")
        return internal_error_response()


@products_bp.post("")
@require_auth
def create_product_route():
    try:
        product = products_service.create_product(g.store_id, request.get_json(silent=True))
        return jsonify({"product": product.to_dict()}), 201
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return internal_error_response()


@products_bp.get("/<int:product_id>")
@require_auth
def get_product_route(product_id: int):
    try:
        return jsonify({"product": products_service.get_product(g.store_id, product_id).to_dict()}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to get product")
        return internal_error_response()


@products_bp.put("/<int:product_id>")
@require_auth
def update_product_route(product_id: int):
    try:
        product = products_service.update_product(g.store_id, product_id, request.get_json(silent=True))
        return jsonify({"product": product.to_dict()}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return internal_error_response()


@products_bp.delete("/<int:product_id>")
@require_auth
def delete_product_route(product_id: int):
    try:
        products_service.delete_product(g.store_id, product_id)
        return jsonify({"message": "Product deleted successfully"}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return internal_error_response()
