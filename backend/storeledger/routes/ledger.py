# Overview: Flask API routes for sales and buying records; parses input and returns JSON responses.

"""
Ledger record routes.

Sales (/api/sales) and buyings (/api/buying) expose the same operations,
so both blueprints are built by make_ledger_blueprint().

- GET    ""                  list, newest first (?customerId= / ?supplierId=)
- POST   ""                  create
- GET    /<id>               read
- PUT    /<id>               patch items / amounts / status
- DELETE /<id>               delete
- POST   /<id>/payments      record a payment {"amount": n}
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..errors import LedgerError
from ..services import ledger_service
from . import error_response, internal_error_response


def make_ledger_blueprint(kind: str, name: str, url_prefix: str) -> Blueprint:
    spec = ledger_service.get_kind(kind)
    counterparty_key = spec.model.counterparty_key
    bp = Blueprint(name, __name__, url_prefix=url_prefix)

    @bp.get("")
    @require_auth
    def list_records():
        try:
            records = ledger_service.list_records(g.store_id, kind, request.args.get(counterparty_key))
            return jsonify({"records": [r.to_dict() for r in records], "count": len(records)}), 200
        except LedgerError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Failed to list %s records", kind)
            return internal_error_response()

    @bp.post("")
    @require_auth
    def create_record():
        try:
            record = ledger_service.create_from_payload(
                g.store_id, kind, request.get_json(silent=True), actor_id=g.current_user.id
            )
            return jsonify({
                "message": f"{spec.label} created successfully.",
                "record": record.to_dict(),
            }), 201
        except LedgerError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Failed to create %s record", kind)
            return internal_error_response()

    @bp.get("/<int:record_id>")
    @require_auth
    def get_record(record_id: int):
        try:
            record = ledger_service.get_record(g.store_id, kind, record_id)
            return jsonify({"record": record.to_dict()}), 200
        except LedgerError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Failed to get %s record", kind)
            return internal_error_response()

    @bp.put("/<int:record_id>")
    @require_auth
    def update_record(record_id: int):
        try:
            record = ledger_service.update_record(g.store_id, kind, record_id, request.get_json(silent=True))
            return jsonify({"record": record.to_dict()}), 200
        except LedgerError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Failed to update %s record", kind)
            return internal_error_response()

    @bp.delete("/<int:record_id>")
    @require_auth
    def delete_record(record_id: int):
        try:
            ledger_service.delete_record(g.store_id, kind, record_id)
            return jsonify({"message": f"{spec.label} deleted successfully."}), 200
        except LedgerError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Failed to delete %s record", kind)
            return internal_error_response()

    @bp.post("/<int:record_id>/payments")
    @require_auth
    def record_payment(record_id: int):
        try:
            data = request.get_json(silent=True)
            amount = data.get("amount") if isinstance(data, dict) else None
            record = ledger_service.record_payment(
                g.store_id, kind, record_id, amount, actor_id=g.current_user.id
            )
            return jsonify({"record": record.to_dict()}), 200
        except LedgerError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Failed to record payment on %s record", kind)
            return internal_error_response()

    return bp


sales_bp = make_ledger_blueprint(ledger_service.KIND_SALE, "sales", "/api/sales")
buying_bp = make_ledger_blueprint(ledger_service.KIND_BUYING, "buying", "/api/buying")
