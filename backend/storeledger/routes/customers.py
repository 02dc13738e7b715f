# Overview: Flask API routes for customers operations; parses input and returns JSON responses.

"""
Customer routes.

TENANCY: Every route works inside g.store_id (set by @require_auth).
Deleting a customer also deletes their sales.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..errors import LedgerError
from ..services import customer_service
from . import error_response, internal_error_response


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
def list_customers_route():
    """
    List customers with totalSales, currentDue and advancePayment.

    Query params:
    - search: matches name or phone (optional)
    """
    try:
        customers = customer_service.list_customers(g.store_id, request.args.get("search"))
        return jsonify({"customers": customers, "count": len(customers)}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list customers")
        return internal_error_response()


@customers_bp.post("")
@require_auth
def create_customer_route():
    try:
        customer = customer_service.create_customer(g.store_id, request.get_json(silent=True))
        return jsonify({"customer": customer.to_dict()}), 201
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return internal_error_response()


@customers_bp.get("/<int:customer_id>")
@require_auth
def get_customer_route(customer_id: int):
    try:
        return jsonify({"customer": customer_service.get_customer(g.store_id, customer_id)}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to get customer")
        return internal_error_response()


@customers_bp.put("/<int:customer_id>")
@require_auth
def update_customer_route(customer_id: int):
    try:
        customer = customer_service.update_customer(g.store_id, customer_id, request.get_json(silent=True))
        return jsonify({"customer": customer.to_dict()}), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update customer")
        return internal_error_response()


@customers_bp.delete("/<int:customer_id>")
@require_auth
def delete_customer_route(customer_id: int):
    try:
        deleted_sales = customer_service.delete_customer(g.store_id, customer_id)
        return jsonify({
            "message": "Customer deleted successfully",
            "deletedSales": deleted_sales,
        }), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete customer")
        return internal_error_response()
