# Overview: Flask API routes for suppliers operations; parses input and returns JSON responses.

"""
Supplier routes.

Supplier payloads include purchase totals and the supplier's buying records.
Deleting a supplier leaves its buying records untouched.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..errors import LedgerError
from ..services import supplier_service
from . import error_response, internal_error_response


suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")


@suppliers_bp.get("")
@require_auth
def list_suppliers_route():
    try:
        suppliers = supplier_service.list_suppliers(g.store_id, request.args.get("search"))
        return jsonify({"suppliers": suppliers, "count": len(suppliers)}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list suppliers")
        return internal_error_response()


@suppliers_bp.post("")
@require_auth
def create_supplier_route():
    try:
        supplier = supplier_service.create_supplier(g.store_id, request.get_json(silent=True))
        return jsonify({"supplier": supplier.to_dict()}), 201
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create supplier")
        return internal_error_response()


@suppliers_bp.get("/<int:supplier_id>")
@require_auth
def get_supplier_route(supplier_id: int):
    try:
        return jsonify({"supplier": supplier_service.get_supplier(g.store_id, supplier_id)}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to get supplier")
        return internal_error_response()


@suppliers_bp.put("/<int:supplier_id>")
@require_auth
def update_supplier_route(supplier_id: int):
    try:
        supplier = supplier_service.update_supplier(g.store_id, supplier_id, request.get_json(silent=True))
        return jsonify({"supplier": supplier.to_dict()}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update supplier")
        return internal_error_response()


@suppliers_bp.delete("/<int:supplier_id>")
@require_auth
def delete_supplier_route(supplier_id: int):
    try:
        supplier_service.delete_supplier(g.store_id, supplier_id)
        return jsonify({"message": "Supplier deleted successfully"}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete supplier")
        return internal_error_response()
